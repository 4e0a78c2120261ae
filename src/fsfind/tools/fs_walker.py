"""
Filesystem walker for fsfind.

This module performs the depth-first traversal behind every query. Each
visited entry is inspected, evaluated against the criteria and reported
when it matches; directories are then descended into before the next
sibling is visited. Failures to inspect or list a path are non-fatal: they
are recorded as diagnostics and only the affected subtree is skipped.
"""

import os
import threading
import time
from typing import Callable, Dict, Iterator, List, Optional, Tuple
import logging

from ..models.criteria import SearchCriteria
from ..models.search_results import Diagnostic, SearchReport
from .inspector import EntryInspector, resolve_user_to_id
from .predicate import PredicateEvaluator


logger = logging.getLogger(__name__)

DiagnosticHandler = Callable[[Diagnostic], None]


class FSWalker:
    """
    Filesystem walker that reports entries matching a SearchCriteria.

    This class provides:
    - Depth-first traversal with self-then-children ordering
    - lstat-style inspection of children, symlinks are never descended
    - Non-fatal diagnostics for unreadable entries and directories
    - Cancellation between entries for embedding in long-lived services

    Pending directories are kept on an explicit stack rather than the
    Python call stack, so tree depth is not bounded by the recursion limit.
    """

    def __init__(
        self,
        inspector: Optional[EntryInspector] = None,
        clock: Callable[[], float] = time.time,
        resolve_user: Callable[[str], Optional[int]] = resolve_user_to_id,
        on_diagnostic: Optional[DiagnosticHandler] = None,
    ):
        """
        Initialize the filesystem walker.

        Args:
            inspector: Metadata provider, a default EntryInspector if None
            clock: Current time source used for age comparisons
            resolve_user: Identity lookup used by the owner criterion
            on_diagnostic: Called with every non-fatal Diagnostic
        """
        self.inspector = inspector or EntryInspector()
        self.clock = clock
        self.resolve_user = resolve_user
        self.on_diagnostic = on_diagnostic
        self.diagnostics: List[Diagnostic] = []
        self._cancelled = threading.Event()
        self._stats = self._empty_stats()

    def walk(self, criteria: SearchCriteria) -> Iterator[str]:
        """
        Walk the tree rooted at ``criteria.root_path``.

        The root itself is inspected following a terminal symlink, the way
        command-line operands are treated; every other entry is inspected
        without following links.

        Args:
            criteria: Immutable criteria of the query

        Returns:
            Iterator over paths of matching entries, in traversal order
        """
        self._cancelled.clear()
        return self._walk(criteria)

    def _walk(self, criteria: SearchCriteria) -> Iterator[str]:
        evaluator = PredicateEvaluator(
            criteria,
            inspector=self.inspector,
            clock=self.clock,
            resolve_user=self.resolve_user,
        )

        root = criteria.root_path
        logger.debug(f"Walking directory tree: {root}")

        try:
            root_metadata = self.inspector.inspect(root, follow_symlinks=True)
        except OSError as e:
            self._report(root, e)
            return

        if self._cancelled.is_set():
            logger.info(f"Walk of {root} cancelled")
            return

        self._stats['entries_visited'] += 1
        if evaluator.matches(root_metadata, root):
            self._stats['entries_matched'] += 1
            yield root

        if not root_metadata.is_dir():
            return

        stack: List[Tuple[str, Iterator[os.DirEntry]]] = []
        try:
            self._push_dir(stack, root)

            while stack:
                if self._cancelled.is_set():
                    logger.info(f"Walk of {root} cancelled")
                    return

                current_dir, it = stack[-1]
                try:
                    entry = next(it)
                except StopIteration:
                    stack.pop()
                    it.close()
                    continue
                except OSError as e:
                    self._report(current_dir, e)
                    stack.pop()
                    it.close()
                    continue

                # scandir never yields "." or ".."
                child = os.path.join(current_dir, entry.name)
                try:
                    metadata = self.inspector.inspect(child, follow_symlinks=False)
                except OSError as e:
                    self._report(child, e)
                    continue

                self._stats['entries_visited'] += 1
                if evaluator.matches(metadata, child):
                    self._stats['entries_matched'] += 1
                    yield child

                if metadata.is_dir():
                    self._push_dir(stack, child)
        finally:
            for _, it in stack:
                it.close()

    def cancel(self) -> None:
        """Stop the current walk before the next entry is visited."""
        self._cancelled.set()

    def _push_dir(self, stack: List[Tuple[str, Iterator[os.DirEntry]]], path: str) -> None:
        """Open a directory for listing and push it; failures are diagnostics."""
        try:
            it = self._open_dir(path)
        except OSError as e:
            self._report(path, e)
            return
        self._stats['directories_traversed'] += 1
        stack.append((path, it))

    def _open_dir(self, path: str) -> Iterator[os.DirEntry]:
        return os.scandir(path)

    def _report(self, path: str, error: OSError) -> None:
        """Record a non-fatal failure and keep walking."""
        diagnostic = Diagnostic.from_os_error(path, error)
        self._stats['errors'] += 1
        self.diagnostics.append(diagnostic)
        logger.warning(str(diagnostic))
        if self.on_diagnostic is not None:
            self.on_diagnostic(diagnostic)

    @staticmethod
    def _empty_stats() -> Dict[str, int]:
        return {
            'entries_visited': 0,
            'entries_matched': 0,
            'directories_traversed': 0,
            'errors': 0,
        }

    def get_stats(self) -> Dict[str, int]:
        """
        Get statistics about the walking operation.

        Returns:
            Dictionary containing operation statistics
        """
        return self._stats.copy()

    def reset_stats(self) -> None:
        """Reset the statistics counters and collected diagnostics."""
        self._stats = self._empty_stats()
        self.diagnostics = []


def search(criteria: SearchCriteria, on_diagnostic: Optional[DiagnosticHandler] = None) -> Iterator[str]:
    """
    Lazily search the filesystem for entries matching criteria.

    The returned iterator is finite and not restartable; every call walks
    the tree again from scratch.

    Args:
        criteria: Criteria of the query
        on_diagnostic: Called with every non-fatal Diagnostic

    Yields:
        Matching paths in traversal order
    """
    walker = FSWalker(on_diagnostic=on_diagnostic)
    yield from walker.walk(criteria)


def run_search(criteria: SearchCriteria, walker: Optional[FSWalker] = None) -> SearchReport:
    """
    Run a search to completion and collect the results.

    Args:
        criteria: Criteria of the query
        walker: Walker to use, a fresh FSWalker if None

    Returns:
        SearchReport with matches, diagnostics and statistics
    """
    walker = walker or FSWalker()
    walker.reset_stats()

    start_time = time.perf_counter()
    matches = list(walker.walk(criteria))
    execution_time = time.perf_counter() - start_time

    return SearchReport(
        criteria=criteria,
        matches=matches,
        diagnostics=list(walker.diagnostics),
        stats=walker.get_stats(),
        execution_time=execution_time,
    )

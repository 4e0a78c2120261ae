"""
Predicate evaluation for fsfind.

Decides whether one inspected entry satisfies every active criterion of a
SearchCriteria. Evaluation is a short-circuiting conjunction: the first
failing criterion rejects the entry.
"""

import fnmatch
import time
from typing import Callable, Optional
import logging

from ..models.criteria import (
    AgeComparator,
    SearchCriteria,
    SizeComparator,
    TypeFilter,
)
from ..models.search_results import EntryMetadata
from .inspector import EntryInspector, resolve_user_to_id


logger = logging.getLogger(__name__)

_UNRESOLVED = object()


_ASCII_LOWER = str.maketrans(
    'ABCDEFGHIJKLMNOPQRSTUVWXYZ',
    'abcdefghijklmnopqrstuvwxyz',
)


def _fold_ascii(text: str) -> str:
    return text.translate(_ASCII_LOWER)


_GLOB_SPECIAL = frozenset('*?[')


def _bracket_end(pattern: str, start: int) -> int:
    """Index of the ``]`` closing the class opened at start, or -1."""
    j = start + 1
    if j < len(pattern) and pattern[j] in '!^':
        j += 1
    # a leading ] is a member of the class
    if j < len(pattern) and pattern[j] == ']':
        j += 1
    return pattern.find(']', j)


def posix_glob(pattern: str) -> str:
    """
    Rewrite a POSIX shell glob into the dialect of :mod:`fnmatch`.

    A backslash quotes the next character and ``[^...]`` negates a class
    like ``[!...]``; neither is understood by fnmatch itself.
    """
    out = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == '\\' and i + 1 < n:
            quoted = pattern[i + 1]
            out.append(f'[{quoted}]' if quoted in _GLOB_SPECIAL else quoted)
            i += 2
        elif ch == '[':
            end = _bracket_end(pattern, i)
            if end < 0:
                out.append('[[]')
                i += 1
                continue
            body = pattern[i + 1:end]
            if body.startswith('^'):
                body = '!' + body[1:]
            out.append(f'[{body}]')
            i = end + 1
        else:
            out.append(ch)
            i += 1
    return ''.join(out)


def match_name(name: str, pattern: str, case_insensitive: bool = False) -> bool:
    """
    Match a base name against a shell glob (``*``, ``?``, ``[...]``).

    Args:
        name: Base name of the entry
        pattern: Shell glob, with backslash quoting and ``[^...]`` classes
        case_insensitive: Fold ASCII case on both sides before matching
    """
    pattern = posix_glob(pattern)
    if case_insensitive:
        return fnmatch.fnmatchcase(_fold_ascii(name), _fold_ascii(pattern))
    return fnmatch.fnmatchcase(name, pattern)


class PredicateEvaluator:
    """
    Evaluates the conjunction of active criteria against entry metadata.

    The evaluator is bound to one SearchCriteria for the lifetime of a walk.
    The owner name is resolved at most once, on first use.
    """

    def __init__(
        self,
        criteria: SearchCriteria,
        inspector: Optional[EntryInspector] = None,
        clock: Callable[[], float] = time.time,
        resolve_user: Callable[[str], Optional[int]] = resolve_user_to_id,
    ):
        """
        Initialize the evaluator.

        Args:
            criteria: Immutable criteria of the query
            inspector: Inspector used for lazy emptiness checks
            clock: Returns the current POSIX timestamp
            resolve_user: Identity lookup from user name to uid
        """
        self.criteria = criteria
        self.inspector = inspector or EntryInspector()
        self.clock = clock
        self.resolve_user = resolve_user
        self._owner_uid = _UNRESOLVED

    def matches(self, metadata: EntryMetadata, path: Optional[str] = None) -> bool:
        """
        Check an entry against every active criterion.

        Args:
            metadata: Metadata of the entry
            path: Path of the entry, defaults to ``metadata.path``

        Returns:
            True if no active criterion rejects the entry
        """
        criteria = self.criteria

        if criteria.type_filter and not self._matches_type(metadata):
            return False

        if criteria.name_pattern is not None:
            if not match_name(metadata.name, criteria.name_pattern):
                return False

        if criteria.name_pattern_case_insensitive is not None:
            if not match_name(metadata.name, criteria.name_pattern_case_insensitive, True):
                return False

        if criteria.size_spec is not None and not self._matches_size(metadata):
            return False

        if criteria.owner_name is not None and not self._matches_owner(metadata):
            return False

        if criteria.perm_spec is not None:
            if (metadata.permissions & 0o777) != criteria.perm_spec:
                return False

        if criteria.mtime_spec is not None and not self._matches_age(metadata):
            return False

        if criteria.empty_only:
            if path is not None and path != metadata.path:
                metadata = metadata.model_copy(update={'path': path})
            if not self.inspector.is_empty(metadata):
                return False

        return True

    def _matches_type(self, metadata: EntryMetadata) -> bool:
        # Both filters may be set; each must hold independently
        if self.criteria.files_only and not metadata.is_regular():
            return False
        if self.criteria.directories_only and not metadata.is_dir():
            return False
        return True

    def _matches_size(self, metadata: EntryMetadata) -> bool:
        spec = self.criteria.size_spec
        if spec.comparator is SizeComparator.GREATER_THAN:
            return metadata.size > spec.bytes
        if spec.comparator is SizeComparator.LESS_THAN:
            return metadata.size < spec.bytes
        return metadata.size == spec.bytes

    def _matches_owner(self, metadata: EntryMetadata) -> bool:
        if self._owner_uid is _UNRESOLVED:
            self._owner_uid = self.resolve_user(self.criteria.owner_name)
            if self._owner_uid is None:
                logger.debug(f"Unknown user '{self.criteria.owner_name}', owner criterion never matches")
        if self._owner_uid is None:
            return False
        return metadata.uid == self._owner_uid

    def _matches_age(self, metadata: EntryMetadata) -> bool:
        # Strict comparisons: an entry aged exactly n days matches neither +n nor -n
        spec = self.criteria.mtime_spec
        age = metadata.age_days(self.clock())
        if spec.comparator is AgeComparator.OLDER_THAN:
            return age > spec.days
        if spec.comparator is AgeComparator.NEWER_THAN:
            return age < spec.days
        return age == spec.days


def matches(metadata: EntryMetadata, criteria: SearchCriteria, path: Optional[str] = None) -> bool:
    """
    Convenience function to evaluate one entry against criteria.

    Args:
        metadata: Metadata of the entry
        criteria: Criteria to evaluate
        path: Path of the entry, defaults to ``metadata.path``

    Returns:
        True if the entry satisfies every active criterion
    """
    return PredicateEvaluator(criteria).matches(metadata, path)

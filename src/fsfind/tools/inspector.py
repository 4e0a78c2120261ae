"""
Filesystem entry inspection for fsfind.

The inspector is the only component that issues metadata syscalls: it
turns a path into EntryMetadata without following a terminal symbolic
link, and answers the emptiness question on demand.
"""

import os
import stat
from typing import Optional
import logging
try:
    import pwd
except ImportError:
    # Windows doesn't have the pwd module
    pwd = None

from ..models.search_results import EntryMetadata, EntryType


logger = logging.getLogger(__name__)


def resolve_user_to_id(name: str) -> Optional[int]:
    """
    Resolve a user name to its numeric identifier.

    Args:
        name: User name to look up in the password database

    Returns:
        The uid, or None when the user is unknown or lookups are unsupported
    """
    if pwd is None:
        return None
    try:
        return pwd.getpwnam(name).pw_uid
    except KeyError:
        return None


def entry_name(path: str) -> str:
    """Base name of a path as typed, ``"dir/"`` yields ``"dir"``."""
    stripped = path.rstrip(os.sep)
    if os.altsep:
        stripped = stripped.rstrip(os.altsep)
    return os.path.basename(stripped) or path


class EntryInspector:
    """
    Obtains per-entry metadata and emptiness determinations.

    Metadata is produced fresh for each call and never cached.
    """

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def inspect(self, path: str, follow_symlinks: bool = False) -> EntryMetadata:
        """
        Obtain metadata for a path.

        Args:
            path: Path as constructed during descent
            follow_symlinks: Whether to resolve a terminal symlink (stat vs lstat)

        Returns:
            EntryMetadata for the entry

        Raises:
            OSError: If the entry cannot be inspected
        """
        stat_result = os.stat(path, follow_symlinks=follow_symlinks)
        return EntryMetadata(
            path=path,
            name=entry_name(path),
            entry_type=EntryType.from_mode(stat_result.st_mode),
            size=stat_result.st_size,
            uid=stat_result.st_uid,
            permissions=stat.S_IMODE(stat_result.st_mode) & 0o777,
            modified_time=stat_result.st_mtime,
        )

    def is_empty(self, metadata: EntryMetadata) -> bool:
        """
        Check whether an entry is empty.

        A regular file is empty when its size is zero, a directory when it
        has no children. Any other entry type is never empty; neither is a
        directory that cannot be listed.
        """
        if metadata.is_regular():
            return metadata.size == 0

        if metadata.is_dir():
            try:
                with os.scandir(metadata.path) as it:
                    for _ in it:
                        return False
            except OSError as e:
                self.logger.debug(f"Cannot list {metadata.path} for emptiness check: {e}")
                return False
            return True

        return False

"""
Search result data models for fsfind.

This module defines per-entry metadata produced while walking, the
diagnostic records emitted for subtrees that could not be inspected, and
the collected report of a complete search.
"""

import math
import stat
from typing import Any, Dict, List, Optional
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field

from .criteria import SearchCriteria


SECONDS_PER_DAY = 24 * 60 * 60


class EntryType(Enum):
    """Filesystem entry types as reported by lstat."""
    REGULAR = "regular"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    CHAR_DEVICE = "char_device"
    BLOCK_DEVICE = "block_device"
    FIFO = "fifo"
    SOCKET = "socket"
    UNKNOWN = "unknown"

    @classmethod
    def from_mode(cls, mode: int) -> 'EntryType':
        """Classify a st_mode value."""
        if stat.S_ISREG(mode):
            return cls.REGULAR
        if stat.S_ISDIR(mode):
            return cls.DIRECTORY
        if stat.S_ISLNK(mode):
            return cls.SYMLINK
        if stat.S_ISCHR(mode):
            return cls.CHAR_DEVICE
        if stat.S_ISBLK(mode):
            return cls.BLOCK_DEVICE
        if stat.S_ISFIFO(mode):
            return cls.FIFO
        if stat.S_ISSOCK(mode):
            return cls.SOCKET
        return cls.UNKNOWN


class EntryMetadata(BaseModel):
    """
    Metadata of one visited filesystem entry.

    Created fresh for every visited path and discarded after the predicate
    decision. Emptiness is deliberately absent: it needs a directory scan
    and is only computed by the inspector when a query asks for it.

    Attributes:
        path: Path as constructed during descent (not canonicalized)
        name: Base name the name patterns are matched against
        entry_type: Entry type, symlinks are not followed
        size: Size in bytes
        uid: Numeric owner identifier
        permissions: Permission bits (rwxrwxrwx)
        modified_time: Modification time as a POSIX timestamp
    """

    path: str = Field(..., min_length=1, description="Path of the entry")
    name: str = Field(..., description="Base name of the entry")
    entry_type: EntryType = Field(..., description="Entry type")
    size: int = Field(..., ge=0, description="Size in bytes")
    uid: int = Field(..., ge=0, description="Numeric owner identifier")
    permissions: int = Field(..., ge=0, le=0o777, description="Permission bits")
    modified_time: float = Field(..., description="Modification timestamp")

    def is_regular(self) -> bool:
        return self.entry_type is EntryType.REGULAR

    def is_dir(self) -> bool:
        return self.entry_type is EntryType.DIRECTORY

    def is_symlink(self) -> bool:
        return self.entry_type is EntryType.SYMLINK

    def age_days(self, now: float) -> int:
        """Whole days elapsed between the modification time and ``now``."""
        return math.floor((now - self.modified_time) / SECONDS_PER_DAY)

    def get_permissions_octal(self) -> str:
        return format(self.permissions, '03o')

    def to_dict(self) -> Dict[str, Any]:
        """Convert metadata to dictionary representation."""
        data = self.model_dump()
        data['entry_type'] = self.entry_type.value
        data['permissions'] = self.get_permissions_octal()
        data['modified_time'] = datetime.fromtimestamp(self.modified_time).isoformat()
        return data


class Diagnostic(BaseModel):
    """
    A non-fatal failure encountered during a walk.

    Attributes:
        path: Path that could not be inspected or listed
        reason: Human readable reason (usually the OS error string)
        errno: OS error number, if known
    """

    path: str = Field(..., description="Path that could not be processed")
    reason: str = Field(..., description="Reason for the failure")
    errno: Optional[int] = Field(None, description="OS error number")

    @classmethod
    def from_os_error(cls, path: str, error: OSError) -> 'Diagnostic':
        return cls(path=path, reason=error.strerror or str(error), errno=error.errno)

    def __str__(self) -> str:
        return f"cannot access '{self.path}': {self.reason}"


class SearchReport(BaseModel):
    """
    Collected results of a complete search.

    Attributes:
        criteria: The criteria that produced these results
        matches: Matching paths in traversal order
        diagnostics: Non-fatal failures reported during the walk
        stats: Walker counters
        execution_time: Time taken to execute the search in seconds
        timestamp: When the search was executed
    """

    criteria: SearchCriteria = Field(..., description="The criteria of the search")
    matches: List[str] = Field(default_factory=list, description="Matching paths")
    diagnostics: List[Diagnostic] = Field(default_factory=list, description="Non-fatal failures")
    stats: Dict[str, int] = Field(default_factory=dict, description="Walker counters")
    execution_time: float = Field(0.0, ge=0.0, description="Time taken to execute the search")
    timestamp: datetime = Field(default_factory=datetime.now, description="When the search was executed")

    def get_match_count(self) -> int:
        return len(self.matches)

    def has_errors(self) -> bool:
        """Check if any subtree could not be inspected."""
        return len(self.diagnostics) > 0

    def sort_paths(self) -> None:
        """Sort matches lexically; traversal order is not deterministic."""
        self.matches.sort()

    def to_dict(self) -> Dict[str, Any]:
        """Convert the report to dictionary representation."""
        data = self.model_dump()
        data['criteria'] = self.criteria.to_dict()
        data['match_count'] = self.get_match_count()
        data['timestamp'] = self.timestamp.isoformat()
        data['has_errors'] = self.has_errors()
        return data

    def __str__(self) -> str:
        parts = [f"Found {self.get_match_count()} matches"]
        parts.append(f"Visited {self.stats.get('entries_visited', 0)} entries")
        parts.append(f"Took {self.execution_time:.2f}s")

        if self.has_errors():
            parts.append(f"Errors: {len(self.diagnostics)}")

        return " | ".join(parts)

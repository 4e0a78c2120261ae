"""
Search criteria data models for fsfind.

This module defines the immutable set of criteria a query is evaluated
against: entry type, name patterns, size, owner, permission bits,
modification age and emptiness, plus the root path of the walk.
"""

from typing import Any, Dict, FrozenSet, Optional
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator


class TypeFilter(Enum):
    """Entry type restrictions."""
    FILE = "f"
    DIRECTORY = "d"


class SizeComparator(Enum):
    """How an entry size is compared against a SizeConstraint."""
    EXACT = "exact"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"


class AgeComparator(Enum):
    """How an entry age in days is compared against an AgeConstraint."""
    EXACT = "exact"
    OLDER_THAN = "older_than"
    NEWER_THAN = "newer_than"


class SizeConstraint(BaseModel):
    """
    A size criterion.

    Attributes:
        comparator: Exact, strictly greater or strictly less
        bytes: Reference size in bytes
    """

    model_config = ConfigDict(frozen=True)

    comparator: SizeComparator = Field(SizeComparator.EXACT, description="Size comparison")
    bytes: int = Field(..., ge=0, description="Reference size in bytes")

    def __str__(self) -> str:
        prefix = {SizeComparator.GREATER_THAN: '+', SizeComparator.LESS_THAN: '-'}
        return f"{prefix.get(self.comparator, '')}{self.bytes}"


class AgeConstraint(BaseModel):
    """
    A modification age criterion, in whole days.

    Attributes:
        comparator: Exact, older than or newer than
        days: Reference age in days
    """

    model_config = ConfigDict(frozen=True)

    comparator: AgeComparator = Field(AgeComparator.EXACT, description="Age comparison")
    days: int = Field(..., ge=0, description="Reference age in days")

    def __str__(self) -> str:
        prefix = {AgeComparator.OLDER_THAN: '+', AgeComparator.NEWER_THAN: '-'}
        return f"{prefix.get(self.comparator, '')}{self.days}"


class SearchCriteria(BaseModel):
    """
    Represents one filesystem query.

    Every optional field independently gates a match; a field left unset
    never excludes an entry. Instances are frozen once validated and are
    shared read-only by every component of a walk.

    Attributes:
        root_path: Starting point of the walk
        type_filter: Required entry types (empty means any type)
        name_pattern: Shell glob matched against the base name
        name_pattern_case_insensitive: Shell glob matched ignoring ASCII case
        size_spec: Size constraint
        owner_name: User name owning the entry
        perm_spec: Exact permission bits (rwxrwxrwx)
        mtime_spec: Modification age constraint
        empty_only: Only match empty regular files and empty directories
    """

    model_config = ConfigDict(frozen=True)

    root_path: str = Field(".", min_length=1, description="Root path of the search")
    type_filter: FrozenSet[TypeFilter] = Field(default_factory=frozenset, description="Required entry types")
    name_pattern: Optional[str] = Field(None, description="Case-sensitive name glob")
    name_pattern_case_insensitive: Optional[str] = Field(None, description="Case-insensitive name glob")
    size_spec: Optional[SizeConstraint] = Field(None, description="Size constraint")
    owner_name: Optional[str] = Field(None, min_length=1, description="Owner user name")
    perm_spec: Optional[int] = Field(None, ge=0, le=0o777, description="Permission bits")
    mtime_spec: Optional[AgeConstraint] = Field(None, description="Modification age constraint")
    empty_only: bool = Field(False, description="Only match empty entries")

    @field_validator('type_filter', mode='before')
    @classmethod
    def validate_type_filter(cls, v) -> FrozenSet[TypeFilter]:
        """Accept a single type, a letter, or any iterable of them."""
        if v is None:
            return frozenset()
        if isinstance(v, (str, TypeFilter)):
            v = [v]

        types = set()
        for item in v:
            if isinstance(item, str):
                try:
                    item = TypeFilter(item)
                except ValueError:
                    raise ValueError(f"Invalid type filter: {item}")
            types.add(item)
        return frozenset(types)

    @field_validator('size_spec', mode='before')
    @classmethod
    def validate_size_spec(cls, v):
        """Parse size specification strings."""
        if isinstance(v, str):
            from ..tools.spec_parsers import parse_size_spec
            return parse_size_spec(v)
        return v

    @field_validator('perm_spec', mode='before')
    @classmethod
    def validate_perm_spec(cls, v):
        """Parse octal permission strings."""
        if isinstance(v, str):
            from ..tools.spec_parsers import parse_perm_spec
            return parse_perm_spec(v)
        return v

    @field_validator('mtime_spec', mode='before')
    @classmethod
    def validate_mtime_spec(cls, v):
        """Parse age specification strings."""
        if isinstance(v, str):
            from ..tools.spec_parsers import parse_age_spec
            return parse_age_spec(v)
        return v

    @property
    def files_only(self) -> bool:
        return TypeFilter.FILE in self.type_filter

    @property
    def directories_only(self) -> bool:
        return TypeFilter.DIRECTORY in self.type_filter

    def has_criteria(self) -> bool:
        """Check if any criterion is active."""
        return bool(
            self.type_filter
            or self.name_pattern is not None
            or self.name_pattern_case_insensitive is not None
            or self.size_spec is not None
            or self.owner_name is not None
            or self.perm_spec is not None
            or self.mtime_spec is not None
            or self.empty_only
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the criteria to a plain dictionary."""
        data = self.model_dump()
        data['type_filter'] = sorted(t.value for t in self.type_filter)
        data['size_spec'] = str(self.size_spec) if self.size_spec else None
        data['perm_spec'] = format(self.perm_spec, '03o') if self.perm_spec is not None else None
        data['mtime_spec'] = str(self.mtime_spec) if self.mtime_spec else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SearchCriteria':
        """Create criteria from a dictionary, parsing spec strings."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        parts = [f"Root: {self.root_path}"]
        if self.type_filter:
            parts.append(f"Type: {','.join(sorted(t.value for t in self.type_filter))}")
        if self.name_pattern is not None:
            parts.append(f"Name: {self.name_pattern}")
        if self.name_pattern_case_insensitive is not None:
            parts.append(f"IName: {self.name_pattern_case_insensitive}")
        if self.size_spec is not None:
            parts.append(f"Size: {self.size_spec}")
        if self.owner_name is not None:
            parts.append(f"Owner: {self.owner_name}")
        if self.perm_spec is not None:
            parts.append(f"Perm: {self.perm_spec:03o}")
        if self.mtime_spec is not None:
            parts.append(f"Mtime: {self.mtime_spec}")
        if self.empty_only:
            parts.append("Empty")
        return " | ".join(parts)

"""
Data models for fsfind.

This module contains the criteria, per-entry metadata and result records
used throughout the system.
"""

from .criteria import (
    AgeComparator,
    AgeConstraint,
    SearchCriteria,
    SizeComparator,
    SizeConstraint,
    TypeFilter,
)
from .search_results import Diagnostic, EntryMetadata, EntryType, SearchReport

__all__ = [
    'AgeComparator',
    'AgeConstraint',
    'SearchCriteria',
    'SizeComparator',
    'SizeConstraint',
    'TypeFilter',
    'Diagnostic',
    'EntryMetadata',
    'EntryType',
    'SearchReport',
]

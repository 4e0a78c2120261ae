"""
Search tools for fsfind.

This module contains the specification parsers, the entry inspector, the
predicate evaluator and the filesystem walker.
"""

from .spec_parsers import SpecParseError, parse_age_spec, parse_perm_spec, parse_size_spec
from .inspector import EntryInspector, resolve_user_to_id
from .predicate import PredicateEvaluator, matches
from .fs_walker import FSWalker, run_search, search

__all__ = [
    'SpecParseError',
    'parse_age_spec',
    'parse_perm_spec',
    'parse_size_spec',
    'EntryInspector',
    'resolve_user_to_id',
    'PredicateEvaluator',
    'matches',
    'FSWalker',
    'run_search',
    'search',
]

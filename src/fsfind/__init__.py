"""
fsfind - Core Package

A find-like filesystem query engine: walks a directory tree depth-first and
reports every entry satisfying the conjunction of type, name, size, owner,
permission, modification age and emptiness criteria.
"""

__version__ = "0.1.0"
__author__ = "fsfind Team"

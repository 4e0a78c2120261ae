"""
Parsers for textual criterion specifications.

This module converts the size, permission and age strings accepted on the
command line (``+100k``, ``755``, ``-3``) into typed constraint values.
All functions are pure and perform no filesystem access.
"""

import re
from typing import Optional

from ..models.criteria import (
    AgeComparator,
    AgeConstraint,
    SizeComparator,
    SizeConstraint,
)


_SIZE_PATTERN = re.compile(r'^([+-]?)([0-9]+)([kKMG]?)$')
_AGE_PATTERN = re.compile(r'^([+-]?)([0-9]+)$')
_PERM_PATTERN = re.compile(r'^[0-7]+$')

SIZE_UNITS = {
    '': 1,
    'k': 1024,
    'K': 1024,
    'M': 1024 ** 2,
    'G': 1024 ** 3,
}

_SIZE_SIGNS = {
    '': SizeComparator.EXACT,
    '+': SizeComparator.GREATER_THAN,
    '-': SizeComparator.LESS_THAN,
}

_AGE_SIGNS = {
    '': AgeComparator.EXACT,
    '+': AgeComparator.OLDER_THAN,
    '-': AgeComparator.NEWER_THAN,
}


class SpecParseError(ValueError):
    """Raised when a size, permission or age specification is malformed."""

    def __init__(self, kind: str, text: Optional[str], detail: str):
        self.kind = kind
        self.text = text
        self.detail = detail
        super().__init__(f"invalid {kind} specification {text!r}: {detail}")


def parse_size_spec(text: Optional[str]) -> SizeConstraint:
    """
    Parse a size specification such as ``100``, ``+1k`` or ``-5M``.

    The optional leading sign selects the comparator and the optional unit
    suffix multiplies the number by 1024, 1024**2 or 1024**3.

    Args:
        text: Size specification string

    Returns:
        SizeConstraint with the comparator and size in bytes

    Raises:
        SpecParseError: If the text is empty, has no digits or an unknown unit
    """
    if text is None or not text.strip():
        raise SpecParseError('size', text, "empty specification")

    match = _SIZE_PATTERN.fullmatch(text.lstrip())
    if not match:
        if not any(ch.isdigit() for ch in text):
            raise SpecParseError('size', text, "no digits")
        raise SpecParseError('size', text, "expected [+|-]<number>[k|K|M|G]")

    sign, digits, unit = match.groups()
    return SizeConstraint(
        comparator=_SIZE_SIGNS[sign],
        bytes=int(digits) * SIZE_UNITS[unit],
    )


def parse_perm_spec(text: Optional[str]) -> int:
    """
    Parse an octal permission string (``"755"``) into a 9-bit mask.

    Raises:
        SpecParseError: If the text is not an octal number
    """
    if text is None or not text.strip():
        raise SpecParseError('permission', text, "empty specification")

    value = text.lstrip()
    if not _PERM_PATTERN.fullmatch(value):
        raise SpecParseError('permission', text, "expected an octal mode such as 644")

    return int(value, 8) & 0o777


def parse_age_spec(text: Optional[str]) -> AgeConstraint:
    """
    Parse a modification age specification: ``5``, ``+7`` or ``-3`` days.

    ``+n`` means more than n whole days have elapsed, ``-n`` fewer than n.

    Raises:
        SpecParseError: If the text is not a signed whole number of days
    """
    if text is None or not text.strip():
        raise SpecParseError('age', text, "empty specification")

    match = _AGE_PATTERN.fullmatch(text.lstrip())
    if not match:
        raise SpecParseError('age', text, "expected [+|-]<days>")

    sign, digits = match.groups()
    return AgeConstraint(comparator=_AGE_SIGNS[sign], days=int(digits))

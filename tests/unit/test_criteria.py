"""
Unit tests for the SearchCriteria data model.
"""

import pytest
from pydantic import ValidationError

from fsfind.models.criteria import (
    AgeComparator,
    AgeConstraint,
    SearchCriteria,
    SizeComparator,
    SizeConstraint,
    TypeFilter,
)


class TestSearchCriteria:
    """Test cases for SearchCriteria."""

    def test_defaults(self):
        """Default criteria search the current directory with nothing active."""
        criteria = SearchCriteria()

        assert criteria.root_path == "."
        assert criteria.type_filter == frozenset()
        assert criteria.name_pattern is None
        assert criteria.size_spec is None
        assert criteria.perm_spec is None
        assert criteria.mtime_spec is None
        assert criteria.empty_only is False
        assert not criteria.has_criteria()

    def test_spec_strings_are_parsed(self):
        """Size, permission and age strings are parsed at construction."""
        criteria = SearchCriteria(size_spec="+1k", perm_spec="755", mtime_spec="-3")

        assert criteria.size_spec == SizeConstraint(comparator=SizeComparator.GREATER_THAN, bytes=1024)
        assert criteria.perm_spec == 0o755
        assert criteria.mtime_spec == AgeConstraint(comparator=AgeComparator.NEWER_THAN, days=3)
        assert criteria.has_criteria()

    @pytest.mark.parametrize("field,value", [
        ("size_spec", "big"),
        ("perm_spec", "rwxr-xr-x"),
        ("mtime_spec", "yesterday"),
    ])
    def test_malformed_specs_abort_construction(self, field, value):
        """A malformed specification rejects the whole criteria."""
        with pytest.raises(ValidationError, match="invalid"):
            SearchCriteria(**{field: value})

    def test_type_filter_forms(self):
        """Type filters accept enums, letters and collections."""
        assert SearchCriteria(type_filter=TypeFilter.FILE).type_filter == {TypeFilter.FILE}
        assert SearchCriteria(type_filter="d").type_filter == {TypeFilter.DIRECTORY}

        both = SearchCriteria(type_filter=["f", TypeFilter.DIRECTORY])
        assert both.files_only
        assert both.directories_only

    def test_invalid_type_filter(self):
        with pytest.raises(ValidationError):
            SearchCriteria(type_filter="l")

    def test_perm_out_of_range(self):
        """Integer permissions must fit in nine bits."""
        with pytest.raises(ValidationError):
            SearchCriteria(perm_spec=0o1000)

    def test_immutable(self):
        """Criteria cannot be modified once constructed."""
        criteria = SearchCriteria(name_pattern="*.py")

        with pytest.raises(ValidationError):
            criteria.name_pattern = "*.c"

    def test_both_name_patterns(self):
        criteria = SearchCriteria(name_pattern="*.C", name_pattern_case_insensitive="main*")

        assert criteria.name_pattern == "*.C"
        assert criteria.name_pattern_case_insensitive == "main*"

    def test_to_dict_and_from_dict(self):
        criteria = SearchCriteria(
            root_path="src",
            type_filter="f",
            size_spec="-10k",
            perm_spec="644",
            mtime_spec="+7",
            empty_only=True,
        )
        data = criteria.to_dict()

        assert data['type_filter'] == ['f']
        assert data['size_spec'] == "-10240"
        assert data['perm_spec'] == "644"
        assert data['mtime_spec'] == "+7"

        restored = SearchCriteria.from_dict(data)
        assert restored == criteria

    def test_str(self):
        criteria = SearchCriteria(root_path="/tmp", name_pattern="*.log", perm_spec="600", empty_only=True)
        text = str(criteria)

        assert "Root: /tmp" in text
        assert "Name: *.log" in text
        assert "Perm: 600" in text
        assert "Empty" in text

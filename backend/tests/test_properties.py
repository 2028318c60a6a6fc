"""
Property-based Testing with Hypothesis.

Pagination arithmetic and field allow-listing hold for all inputs,
not just the hand-picked cases.
"""

import math

import pytest
from hypothesis import given, settings, strategies as st

from rest_api.services.query import FieldRegistry, compute_pagination
from shared.utils.exceptions import InvalidFieldError


FIELDS = ["id", "name", "shirt_color", "created_at", "updated_at"]
registry = FieldRegistry({"team": FIELDS})

field_names = st.text(alphabet="abcdefghijklmnopqrstuvwxyz_", min_size=1, max_size=12)


class TestPaginationProperties:
    """Property-based tests for the pagination calculator."""

    @given(
        total=st.integers(min_value=0, max_value=1_000_000),
        limit=st.integers(min_value=1, max_value=100),
        page=st.integers(min_value=1, max_value=10_000),
    )
    @settings(max_examples=200)
    def test_pagination_invariants(self, total, limit, page):
        """Property: page count and neighbours follow from page, limit and total."""
        result = compute_pagination(page, limit, total)

        assert result.number_of_pages == math.ceil(total / limit)
        assert (result.next_page is not None) == (page * limit < total)
        assert (result.prev_page is not None) == (page > 1)
        if result.next_page is not None:
            assert result.next_page == page + 1
        if result.prev_page is not None:
            assert result.prev_page == page - 1

    @given(
        total=st.integers(min_value=0, max_value=10_000),
        limit=st.integers(min_value=1, max_value=100),
    )
    def test_pages_cover_every_row(self, total, limit):
        """Property: full pages plus the remainder add up to the total."""
        result = compute_pagination(1, limit, total)
        covered = sum(
            min(limit, total - (page - 1) * limit)
            for page in range(1, result.number_of_pages + 1)
        )
        assert covered == total


class TestFieldAllowListProperties:
    """Property-based tests for the field registry."""

    @given(names=st.lists(st.one_of(st.sampled_from(FIELDS), field_names), max_size=8))
    def test_fails_iff_any_field_unknown(self, names):
        """Property: validation fails exactly when some name is unknown, listing all of them."""
        unknown = [name for name in dict.fromkeys(names) if name not in FIELDS]

        if unknown:
            with pytest.raises(InvalidFieldError) as exc_info:
                registry.validate("team", names)
            assert exc_info.value.invalid_fields == unknown
        else:
            registry.validate("team", names)

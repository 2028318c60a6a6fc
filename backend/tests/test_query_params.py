"""
Tests for list query string parsing.
"""

import pytest

from rest_api.routers._common import parse_query_items, validate_reserved
from shared.utils.exceptions import InvalidInputError, ValidationError


class TestParseQueryItems:
    def test_plain_keys(self):
        assert parse_query_items([("position", "Forward"), ("page", "2")]) == {
            "position": "Forward",
            "page": "2",
        }

    def test_bracket_keys_nest(self):
        items = [("age[gte]", "20"), ("age[lt]", "30")]
        assert parse_query_items(items) == {"age": {"gte": "20", "lt": "30"}}

    def test_last_value_wins(self):
        assert parse_query_items([("sort", "name"), ("sort", "-age")]) == {"sort": "-age"}

    def test_bracket_replaces_scalar(self):
        items = [("age", "20"), ("age[gte]", "25")]
        assert parse_query_items(items) == {"age": {"gte": "25"}}

    def test_operator_on_reserved_key(self):
        with pytest.raises(InvalidInputError):
            parse_query_items([("limit[lt]", "5")])


class TestValidateReserved:
    def test_valid(self):
        validate_reserved({"sort": "-name,created_at", "fields": "name,id", "page": "1"})

    @pytest.mark.parametrize(
        "query",
        [
            {"sort": "name desc"},
            {"fields": "-name"},
            {"keyword": "x" * 101},
        ],
    )
    def test_invalid(self, query):
        with pytest.raises(ValidationError) as exc_info:
            validate_reserved(query)
        assert exc_info.value.details["errors"]

    def test_data_keys_are_ignored(self):
        validate_reserved({"name": "anything goes; here"})

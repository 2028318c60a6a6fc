"""
Tests for QueryTranslator - query string to descriptor, and execution.

Tests cover:
- filter / sort / limit_fields / keyword_search parsing
- Allow-list and input validation errors
- Pagination and execution against SQLite
- Store failures surfacing as QueryExecutionError
"""

import pytest
from sqlalchemy.exc import OperationalError

from rest_api.models import Player, Team
from rest_api.services.crud import ModelDelegate
from rest_api.services.query import FieldRegistry, KeywordConstraint, QueryTranslator
from shared.utils.exceptions import (
    ConfigurationError,
    InvalidFieldError,
    InvalidInputError,
    InvalidLimitError,
    InvalidPageError,
    QueryExecutionError,
)
from tests.conftest import letter_name


@pytest.fixture
def teams(db_session):
    return ModelDelegate(db_session, Team, entity_name="team")


@pytest.fixture
def players(db_session):
    return ModelDelegate(db_session, Player, entity_name="player")


class TestFilter:
    """Tests for QueryTranslator.filter()"""

    def test_scalar_is_equality(self, players):
        translator = QueryTranslator(players, {"position": "Forward"}).filter()
        assert translator.descriptor.predicate == {"position": {"eq": "Forward"}}

    def test_operators_combine_into_range(self, players):
        query = {"age": {"gte": "20", "lt": "30"}}
        translator = QueryTranslator(players, query).filter()
        assert translator.descriptor.predicate == {"age": {"gte": "20", "lt": "30"}}

    def test_reserved_keys_are_not_constraints(self, players):
        query = {"sort": "-age", "page": "2", "limit": "5", "fields": "name", "keyword": "mo"}
        translator = QueryTranslator(players, query).filter()
        assert translator.descriptor.predicate == {}

    def test_unknown_fields_all_listed(self, teams):
        with pytest.raises(InvalidFieldError) as exc_info:
            QueryTranslator(teams, {"age": "20", "name": "x", "salary": "1"}).filter()
        assert exc_info.value.invalid_fields == ["age", "salary"]

    def test_unknown_operator_fails(self, players):
        with pytest.raises(InvalidInputError) as exc_info:
            QueryTranslator(players, {"age": {"ne": "20"}}).filter()
        assert exc_info.value.error_code == "INVALID_INPUT"

    def test_list_value_fails(self, players):
        with pytest.raises(InvalidInputError):
            QueryTranslator(players, {"age": ["20", "21"]}).filter()

    def test_idempotent(self, players):
        translator = QueryTranslator(players, {"age": {"gte": "20"}})
        first = dict(translator.filter().descriptor.predicate)
        second = dict(translator.filter().descriptor.predicate)
        assert first == second


class TestSort:
    """Tests for QueryTranslator.sort()"""

    def test_descending_prefix(self, teams):
        translator = QueryTranslator(teams, {"sort": "-name"}).sort()
        assert translator.descriptor.order_as_dicts() == [{"name": "desc"}]

    def test_multiple_fields_keep_order(self, players):
        translator = QueryTranslator(players, {"sort": "-salary,name"}).sort()
        assert translator.descriptor.order == [("salary", "desc"), ("name", "asc")]

    def test_invalid_field_reported_without_prefix(self, teams):
        with pytest.raises(InvalidFieldError) as exc_info:
            QueryTranslator(teams, {"sort": "-name,age"}).sort()
        assert exc_info.value.invalid_fields == ["age"]

    def test_default_is_newest_first(self, teams):
        translator = QueryTranslator(teams, {}).sort()
        assert translator.descriptor.order == [("created_at", "desc")]

    def test_blank_tokens_are_skipped(self, teams):
        translator = QueryTranslator(teams, {"sort": "name,,"}).sort()
        assert translator.descriptor.order == [("name", "asc")]

    def test_repeated_field_keeps_first(self, teams):
        translator = QueryTranslator(teams, {"sort": "name,-name"}).sort()
        assert translator.descriptor.order == [("name", "asc")]


class TestLimitFields:
    """Tests for QueryTranslator.limit_fields()"""

    def test_projection(self, players):
        translator = QueryTranslator(players, {"fields": "name,salary"}).limit_fields()
        assert translator.descriptor.projection == frozenset({"name", "salary"})

    def test_absent_means_all(self, players):
        translator = QueryTranslator(players, {}).limit_fields()
        assert translator.descriptor.projection is None

    def test_unknown_field(self, teams):
        with pytest.raises(InvalidFieldError) as exc_info:
            QueryTranslator(teams, {"fields": "name,salary,age"}).limit_fields()
        assert exc_info.value.invalid_fields == ["salary", "age"]


class TestKeywordSearch:
    """Tests for QueryTranslator.keyword_search()"""

    def test_defaults_to_name(self, players):
        translator = QueryTranslator(players, {"keyword": " sal "}).keyword_search()
        assert translator.descriptor.predicate == {"name": {"icontains": "sal"}}
        assert translator.descriptor.keyword_constraint == KeywordConstraint("name", "sal")

    def test_keeps_other_constraints(self, players):
        query = {"keyword": "mo", "age": {"gte": "20"}}
        translator = QueryTranslator(players, query).filter().keyword_search()
        assert translator.descriptor.predicate == {
            "age": {"gte": "20"},
            "name": {"icontains": "mo"},
        }

    def test_replaces_constraint_on_same_field(self, players):
        query = {"keyword": "mo", "name": "Salah"}
        translator = QueryTranslator(players, query).filter().keyword_search()
        assert translator.descriptor.predicate == {"name": {"icontains": "mo"}}

    def test_absent_keyword_is_noop(self, players):
        translator = QueryTranslator(players, {}).keyword_search()
        assert translator.descriptor.predicate == {}
        assert translator.descriptor.keyword_constraint is None

    def test_blank_keyword_fails(self, players):
        with pytest.raises(InvalidInputError):
            QueryTranslator(players, {"keyword": "   "}).keyword_search()

    def test_unknown_field(self, players):
        with pytest.raises(InvalidFieldError):
            QueryTranslator(players, {"keyword": "x"}).keyword_search("nickname")


class TestPaginate:
    """Tests for QueryTranslator.paginate()"""

    def test_defaults(self, teams, make_team):
        make_team("Liverpool")
        translator = QueryTranslator(teams, {}).paginate()

        assert translator.pagination.page == 1
        assert translator.pagination.limit == 50
        assert translator.pagination.total == 1
        assert translator.descriptor.window.skip == 0
        assert translator.descriptor.window.take == 50

    @pytest.mark.parametrize("page", ["0", "-1", "abc", "1.5"])
    def test_invalid_page(self, teams, page):
        with pytest.raises(InvalidPageError):
            QueryTranslator(teams, {"page": page}).paginate()

    @pytest.mark.parametrize("limit", ["0", "101", "ten"])
    def test_invalid_limit(self, teams, limit):
        with pytest.raises(InvalidLimitError):
            QueryTranslator(teams, {"limit": limit}).paginate()

    def test_count_respects_predicate(self, teams, make_team):
        make_team("Liverpool", "red")
        make_team("Chelsea", "blue")
        translator = QueryTranslator(teams, {"shirt_color": "red"}).filter().paginate()
        assert translator.pagination.total == 1


class TestExecute:
    """End-to-end execution against SQLite."""

    def test_second_page_of_twenty_five(self, teams, many_teams):
        first = QueryTranslator(teams, {"page": "1", "limit": "10"}).filter().sort().execute()
        second = QueryTranslator(teams, {"page": "2", "limit": "10"}).filter().sort().execute()

        assert second.pagination.to_dict() == {
            "page": 2,
            "limit": 10,
            "number_of_pages": 3,
            "total": 25,
            "next_page": 3,
            "prev_page": 1,
        }
        assert len(second.data) == 10
        assert not {row["id"] for row in first.data} & {row["id"] for row in second.data}

    def test_last_page_is_partial(self, teams, many_teams):
        result = QueryTranslator(teams, {"page": "3", "limit": "10"}).sort().execute()
        assert len(result.data) == 5

    def test_keyword_is_case_insensitive(self, players, seed_team, make_player):
        make_player(seed_team, "Salah")
        make_player(seed_team, "Hassan")

        result = QueryTranslator(players, {"keyword": "sal"}).keyword_search().execute()

        assert [row["name"] for row in result.data] == ["Salah"]

    def test_keyword_wildcards_are_literal(self, players, seed_team, make_player):
        make_player(seed_team, "Salah")
        result = QueryTranslator(players, {"keyword": "%"}).keyword_search().execute()
        assert result.data == []

    def test_range_filter_and_sort(self, players, seed_team, make_player):
        make_player(seed_team, "Young", age=18)
        make_player(seed_team, "Prime", age=27)
        make_player(seed_team, "Veteran", age=38)

        query = {"age": {"gte": "20", "lte": "40"}, "sort": "-age"}
        result = QueryTranslator(players, query).filter().sort().execute()

        assert [row["name"] for row in result.data] == ["Veteran", "Prime"]

    def test_projection_always_has_id(self, players, seed_team, make_player):
        make_player(seed_team, "Salah", salary=50000)
        result = QueryTranslator(players, {"fields": "name,salary"}).limit_fields().execute()
        assert result.data == [
            {"id": result.data[0]["id"], "name": "Salah", "salary": 50000.0}
        ]

    def test_uncoercible_value(self, players):
        with pytest.raises(InvalidInputError):
            QueryTranslator(players, {"age": "old"}).filter().execute()

    def test_include_relations(self, teams, seed_roster):
        team, _ = seed_roster
        result = QueryTranslator(teams, {}).include_relations(["players"]).execute()
        assert len(result.data[0]["players"]) == 2

    def test_unknown_relation(self, teams):
        with pytest.raises(ConfigurationError):
            QueryTranslator(teams, {}).include_relations(["coach"])

    def test_execute_with_transaction(self, teams, many_teams):
        result = QueryTranslator(teams, {"limit": "5"}).execute_with_transaction()
        assert len(result.data) == 5
        assert result.pagination.total == 25

    def test_store_failure(self, teams, monkeypatch):
        def broken_count(predicate):
            raise OperationalError("SELECT count(*)", {}, Exception("database is locked"))

        monkeypatch.setattr(teams, "count", broken_count)

        with pytest.raises(QueryExecutionError) as exc_info:
            QueryTranslator(teams, {}).execute()
        assert exc_info.value.error_code == "DATABASE_ERROR"
        assert exc_info.value.status_code == 500


class TestConstruction:
    def test_unregistered_entity(self, db_session):
        registry = FieldRegistry({"player": ["id", "name"]})
        delegate = ModelDelegate(db_session, Team, entity_name="team")
        with pytest.raises(ConfigurationError):
            QueryTranslator(delegate, {}, registry=registry)

    def test_letter_name_helper(self):
        assert letter_name(0) == "Team A"
        assert letter_name(25) == "Team Z"
        assert letter_name(26) == "Team AA"

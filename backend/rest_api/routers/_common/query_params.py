"""
List query string parsing.

Turns the raw query string into the mapping the query translator reads.
Bracket keys become operator mappings; repeated keys keep the last value.

    ?age[gte]=20&age[lt]=30&position=Forward&sort=-salary&page=2
    # {"age": {"gte": "20", "lt": "30"}, "position": "Forward",
    #  "sort": "-salary", "page": "2"}

Usage:
    @router.get("")
    def list_players(query: dict = Depends(get_list_query), ...):
        ...
"""

import re
from typing import Any

from fastapi import Request
from pydantic import ValidationError as PydanticValidationError

from shared.config.constants import QueryKeys
from shared.utils.exceptions import InvalidInputError, ValidationError
from shared.utils.schemas import ListQueryOptions

_BRACKET_KEY = re.compile(r"^(?P<field>[^\[\]]+)\[(?P<op>[^\[\]]+)\]$")


def parse_query_items(items: list[tuple[str, str]]) -> dict[str, Any]:
    """
    Build the translator mapping from (key, value) pairs.

    Raises:
        InvalidInputError: If a reserved key is used with an operator.
    """
    query: dict[str, Any] = {}
    for key, value in items:
        match = _BRACKET_KEY.match(key)
        if match is None:
            query[key] = value
            continue

        field, op = match.group("field"), match.group("op")
        if field in QueryKeys.RESERVED:
            raise InvalidInputError(f"'{field}' does not accept an operator", field=field)

        existing = query.get(field)
        if not isinstance(existing, dict):
            existing = {}
            query[field] = existing
        existing[op] = value
    return query


def validate_reserved(query: dict[str, Any]) -> None:
    """
    Check the format of sort/fields/page/limit/keyword.

    Raises:
        ValidationError: Listing each malformed key.
    """
    reserved = {key: query[key] for key in QueryKeys.RESERVED if key in query}
    try:
        ListQueryOptions(**reserved)
    except PydanticValidationError as exc:
        errors = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in exc.errors()
        ]
        raise ValidationError(
            "Invalid query string",
            details={"errors": errors},
        ) from None


def get_list_query(request: Request) -> dict[str, Any]:
    """FastAPI dependency returning the parsed and format-checked query."""
    query = parse_query_items(request.query_params.multi_items())
    validate_reserved(query)
    return query

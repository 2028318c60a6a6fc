"""
Centralized constants for the backend application.
Avoid magic strings and repeated constants.

Usage:
    from shared.config.constants import QueryKeys, Limits, ShirtColors

    if key in QueryKeys.RESERVED:
        ...
"""

from typing import Final


# =============================================================================
# Query String
# =============================================================================


class QueryKeys:
    """Reserved (control) keys of a list query string."""

    SORT: Final[str] = "sort"
    PAGE: Final[str] = "page"
    LIMIT: Final[str] = "limit"
    FIELDS: Final[str] = "fields"
    KEYWORD: Final[str] = "keyword"

    RESERVED: Final[frozenset[str]] = frozenset({SORT, PAGE, LIMIT, FIELDS, KEYWORD})


class ComparisonOperators:
    """Operators accepted inside a nested filter value, e.g. age[gte]=20."""

    GT: Final[str] = "gt"
    GTE: Final[str] = "gte"
    LT: Final[str] = "lt"
    LTE: Final[str] = "lte"

    ALL: Final[frozenset[str]] = frozenset({GT, GTE, LT, LTE})


class PredicateOperators:
    """Operators a QueryDescriptor predicate may carry."""

    EQ: Final[str] = "eq"
    ICONTAINS: Final[str] = "icontains"

    ALL: Final[frozenset[str]] = ComparisonOperators.ALL | {EQ, ICONTAINS}


class SortDirection:
    """Sort direction tokens."""

    ASC: Final[str] = "asc"
    DESC: Final[str] = "desc"
    DESC_PREFIX: Final[str] = "-"


# =============================================================================
# Limits
# =============================================================================


class Limits:
    """Validation limits."""

    # Pagination defaults
    DEFAULT_PAGE: Final[int] = 1
    DEFAULT_PAGE_SIZE: Final[int] = 50
    MIN_PAGE_SIZE: Final[int] = 1
    MAX_PAGE_SIZE: Final[int] = 100

    # Team
    MIN_TEAM_NAME_LENGTH: Final[int] = 3
    MAX_TEAM_NAME_LENGTH: Final[int] = 100

    # Player
    MIN_PLAYER_NAME_LENGTH: Final[int] = 2
    MAX_PLAYER_NAME_LENGTH: Final[int] = 100
    MIN_PLAYER_AGE: Final[int] = 16
    MAX_PLAYER_AGE: Final[int] = 45


# =============================================================================
# Domain Values
# =============================================================================


class ShirtColors:
    """Allowed team shirt colors."""

    ALL: Final[tuple[str, ...]] = (
        "red",
        "blue",
        "green",
        "yellow",
        "white",
        "black",
        "orange",
        "purple",
        "pink",
        "brown",
    )


class PlayerPositions:
    """Allowed player positions."""

    GOALKEEPER: Final[str] = "Goalkeeper"
    DEFENDER: Final[str] = "Defender"
    MIDFIELDER: Final[str] = "Midfielder"
    FORWARD: Final[str] = "Forward"

    ALL: Final[tuple[str, ...]] = (GOALKEEPER, DEFENDER, MIDFIELDER, FORWARD)


# =============================================================================
# Error Codes
# =============================================================================


class ErrorCodes:
    """Machine-readable error codes returned in error envelopes."""

    RECORD_NOT_FOUND: Final[str] = "RECORD_NOT_FOUND"
    DUPLICATE_ENTRY: Final[str] = "DUPLICATE_ENTRY"
    FOREIGN_KEY_ERROR: Final[str] = "FOREIGN_KEY_ERROR"
    VALIDATION_ERROR: Final[str] = "VALIDATION_ERROR"
    INVALID_FIELD: Final[str] = "INVALID_FIELD"
    INVALID_PAGE: Final[str] = "INVALID_PAGE"
    INVALID_LIMIT: Final[str] = "INVALID_LIMIT"
    INVALID_INPUT: Final[str] = "INVALID_INPUT"
    DATABASE_ERROR: Final[str] = "DATABASE_ERROR"
    TRANSACTION_ERROR: Final[str] = "TRANSACTION_ERROR"
    CONFIGURATION_ERROR: Final[str] = "CONFIGURATION_ERROR"
    RATE_LIMITED: Final[str] = "RATE_LIMITED"
    INTERNAL_ERROR: Final[str] = "INTERNAL_ERROR"

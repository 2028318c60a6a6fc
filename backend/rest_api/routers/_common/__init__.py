"""
Common utilities shared across routers.
"""

from .query_params import get_list_query, parse_query_items, validate_reserved
from .responses import paginated, success

__all__ = [
    # Query string
    "get_list_query",
    "parse_query_items",
    "validate_reserved",
    # Envelopes
    "paginated",
    "success",
]

"""
Query translation for list endpoints.

Query string -> QueryDescriptor (validated) -> data store delegate -> PageResult.
"""

from rest_api.services.query.descriptor import (
    KeywordConstraint,
    Order,
    Predicate,
    QueryDescriptor,
)
from rest_api.services.query.field_registry import FieldRegistry, field_registry
from rest_api.services.query.pagination import PaginationResult, Window, compute_pagination
from rest_api.services.query.translator import PageResult, QueryTranslator

__all__ = [
    "FieldRegistry",
    "KeywordConstraint",
    "Order",
    "PageResult",
    "PaginationResult",
    "Predicate",
    "QueryDescriptor",
    "QueryTranslator",
    "Window",
    "compute_pagination",
    "field_registry",
]

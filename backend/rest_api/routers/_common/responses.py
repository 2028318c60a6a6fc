"""
Response envelopes.

    {"status": "success", "message": "...", "data": {"team": {...}}}

List responses also carry the row count and pagination metadata:

    {"status": "success", "message": "...", "results": 10,
     "pagination": {...}, "data": {"teams": [...]}}
"""

from typing import Any

from rest_api.services.query import PageResult


def success(data: Any = None, message: str = "success") -> dict[str, Any]:
    """Standard success envelope."""
    return {"status": "success", "message": message, "data": data}


def paginated(key: str, result: PageResult, message: str = "success") -> dict[str, Any]:
    """Success envelope for one page of a list query."""
    return {
        "status": "success",
        "message": message,
        "results": len(result.data),
        "pagination": result.pagination.to_dict(),
        "data": {key: result.data},
    }

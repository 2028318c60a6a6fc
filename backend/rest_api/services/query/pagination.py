"""
Pagination Calculator.

Pure page arithmetic, independent of any data store:

    compute_pagination(page=2, limit=10, total=25)
    # PaginationResult(page=2, limit=10, number_of_pages=3, total=25,
    #                  next_page=3, prev_page=1)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from shared.config.constants import Limits
from shared.utils.exceptions import InvalidLimitError, InvalidPageError


class PaginationResult(BaseModel):
    """
    Pagination metadata of one page of a list query.

    next_page is set iff page * limit < total; prev_page iff page > 1.
    Unset keys are omitted from the serialized form.
    """

    page: int = Field(ge=1)
    limit: int = Field(ge=Limits.MIN_PAGE_SIZE)
    number_of_pages: int = Field(ge=0)
    total: int = Field(ge=0)
    next_page: int | None = None
    prev_page: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


@dataclass(frozen=True)
class Window:
    """Skip/take slice of an ordered result set."""

    skip: int = 0
    take: int = Limits.DEFAULT_PAGE_SIZE

    @classmethod
    def for_page(cls, page: int, limit: int) -> Window:
        return cls(skip=(page - 1) * limit, take=limit)


def compute_pagination(
    page: int,
    limit: int,
    total: int,
    *,
    max_limit: int = Limits.MAX_PAGE_SIZE,
) -> PaginationResult:
    """
    Derive page count and neighbours from a total row count.

    Raises:
        InvalidPageError: page < 1.
        InvalidLimitError: limit outside [1, max_limit].
        ValueError: total < 0.
    """
    if page < 1:
        raise InvalidPageError(page)
    if not Limits.MIN_PAGE_SIZE <= limit <= max_limit:
        raise InvalidLimitError(limit, Limits.MIN_PAGE_SIZE, max_limit)
    if total < 0:
        raise ValueError(f"total must be >= 0, got {total}")

    return PaginationResult(
        page=page,
        limit=limit,
        number_of_pages=math.ceil(total / limit),
        total=total,
        next_page=page + 1 if page * limit < total else None,
        prev_page=page - 1 if (page - 1) * limit > 0 else None,
    )

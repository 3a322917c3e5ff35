# backend/servicebooking/core/pagination.py
"""
Pagination engine shared by every list operation.

Windows an ordered source (a SQLAlchemy ``Query`` or any in-memory sequence)
into a single page plus the metadata clients need to walk the rest.
The source's own ordering is preserved; nothing here reorders items.
"""

from dataclasses import dataclass, field
import math
from typing import Any, Dict, Generic, Iterable, List, Sequence, TypeVar, Union

from sqlalchemy.orm import Query

from .exceptions import ValidationException

T = TypeVar("T")


@dataclass(frozen=True)
class PagedResult(Generic[T]):
    """One page of items together with the totals it was cut from."""

    items: List[T]
    page_number: int
    page_size: int
    total_count: int
    total_pages: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "total_pages", math.ceil(self.total_count / self.page_size))

    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages

    def metadata(self) -> Dict[str, Any]:
        return {
            "total_count": self.total_count,
            "page_size": self.page_size,
            "page_number": self.page_number,
            "total_pages": self.total_pages,
            "has_next_page": self.has_next_page,
            "has_previous_page": self.has_previous_page,
        }


def _validate_window(page_number: int, page_size: int) -> None:
    if page_number < 1:
        raise ValidationException(
            "page_number must be 1 or greater",
            code="INVALID_PAGE_NUMBER",
            details={"page_number": page_number},
        )
    if page_size < 1:
        raise ValidationException(
            "page_size must be 1 or greater",
            code="INVALID_PAGE_SIZE",
            details={"page_size": page_size},
        )


def paginate(
    source: Union[Query, Sequence[T], Iterable[T]], page_number: int, page_size: int
) -> PagedResult[T]:
    """
    Cut one page out of an ordered source.

    Args:
        source: SQLAlchemy query (counted and windowed in SQL) or an in-memory collection
        page_number: 1-based page index; pages past the end yield no items
        page_size: Items per page

    Returns:
        PagedResult with the page's items and the totals of the whole source

    Raises:
        ValidationException: If page_number or page_size is below 1
    """
    _validate_window(page_number, page_size)
    offset = (page_number - 1) * page_size

    if isinstance(source, Query):
        # Counting must ignore ORDER BY and eager loads; both are irrelevant to the total.
        total_count = source.order_by(None).count()
        items = source.offset(offset).limit(page_size).all() if offset < total_count else []
    else:
        collected = source if isinstance(source, Sequence) else list(source)
        total_count = len(collected)
        items = list(collected[offset : offset + page_size])

    return PagedResult(
        items=list(items),
        page_number=page_number,
        page_size=page_size,
        total_count=total_count,
    )

"""
Module: recognition_kernel.selectors.base
Responsibility: Abstract base class for read-only query selectors, plus the
    pagination value objects every paged query returns.
Architecture position: Kernel > Selectors.  May import from db/.  MUST NOT
    import from services/ or outer packages.

Invariants enforced:
    - Read-only access: selectors MUST NOT call session.add(), delete(),
      commit() or flush().
    - DTO return convention: selectors return frozen dataclasses, not ORM
      instances.
    - Page numbering is 0-based.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from recognition_kernel.exceptions import ValidationError

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True)
class PageRequest:
    """0-based page number and page size."""

    page: int = 0
    size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValidationError("page", "must be >= 0")
        if self.size <= 0:
            raise ValidationError("size", "must be > 0")

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results with the totals needed to render navigation."""

    content: tuple[T, ...]
    page_number: int
    page_size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        if self.total_elements == 0:
            return 0
        return -(-self.total_elements // self.page_size)

    @property
    def has_next(self) -> bool:
        return self.page_number + 1 < self.total_pages

    def __len__(self) -> int:
        return len(self.content)


class BaseSelector(ABC):
    """
    Abstract base class for all selectors.

    Selectors accept a Session from the caller, perform read-only queries,
    and return DTOs or computed results.
    """

    def __init__(self, session: Session):
        self.session = session

    def _paginate(
        self,
        stmt: Select,
        request: PageRequest,
        to_dto,
    ) -> Page:
        """Run *stmt* for one page and count its full result set."""
        total = self.session.scalar(
            select(func.count()).select_from(stmt.order_by(None).subquery())
        ) or 0
        rows: Sequence = self.session.scalars(
            stmt.offset(request.offset).limit(request.size)
        ).all()
        return Page(
            content=tuple(to_dto(row) for row in rows),
            page_number=request.page,
            page_size=request.size,
            total_elements=total,
        )

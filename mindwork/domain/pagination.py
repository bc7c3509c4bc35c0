"""Page arithmetic and the paginated query helper shared by every listing.

Count and page fetch run as two independent statements, so under concurrent
writes they can describe slightly different moments. Listings accept that.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import func, select

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


@dataclass(frozen=True, slots=True)
class PageRequest:
    page_number: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def normalize(cls, page_number: int | None, page_size: int | None) -> PageRequest:
        """Clamp caller input: page < 1 becomes 1, size outside 1..50 becomes 10."""
        number = page_number if page_number is not None and page_number > 0 else 1
        size = page_size
        if size is None or size <= 0 or size > MAX_PAGE_SIZE:
            size = DEFAULT_PAGE_SIZE
        return cls(page_number=number, page_size=size)

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size


@dataclass(frozen=True, slots=True)
class Link:
    href: str
    rel: str
    method: str = "GET"


@dataclass(slots=True)
class Page(Generic[T]):
    items: list[T]
    page_number: int
    page_size: int
    total_count: int
    links: list[Link] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.page_size else 0

    @property
    def has_previous(self) -> bool:
        return self.page_number > 1

    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages

    def add_link(self, href: str, rel: str, method: str = "GET") -> None:
        self.links.append(Link(href=href, rel=rel, method=method))


async def paginate(
    session: AsyncSession,
    stmt: Select[tuple[Any]],
    request: PageRequest,
) -> Page[Any]:
    """Run a filtered, totally ordered select and return one page of scalars.

    The total is counted over the filtered statement before offset/limit.
    An offset past the end yields an empty page.
    """
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = await session.scalar(count_stmt) or 0

    rows = await session.execute(stmt.offset(request.offset).limit(request.page_size))
    return Page(
        items=list(rows.scalars().all()),
        page_number=request.page_number,
        page_size=request.page_size,
        total_count=total,
    )

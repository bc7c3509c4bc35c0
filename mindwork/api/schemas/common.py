"""Shared response shapes: camelCase wire names and paged collections."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from mindwork.domain.pagination import Page

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema serialised with camelCase keys; accepts either spelling on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LinkResponse(CamelModel):
    href: str = Field(..., description="Target URL")
    rel: str = Field(..., description="Relation: self, next or previous")
    method: str = Field(default="GET", description="HTTP method")


class PagedResponse(CamelModel, Generic[T]):
    """One page of a listing plus navigation metadata."""

    items: list[T]
    page_number: int
    page_size: int
    total_count: int
    total_pages: int
    has_previous: bool
    has_next: bool
    links: list[LinkResponse] = Field(default_factory=list)

    @classmethod
    def from_page(cls, page: Page[Any], build_item: Callable[[Any], T]) -> PagedResponse[T]:
        return cls(
            items=[build_item(item) for item in page.items],
            page_number=page.page_number,
            page_size=page.page_size,
            total_count=page.total_count,
            total_pages=page.total_pages,
            has_previous=page.has_previous,
            has_next=page.has_next,
            links=[
                LinkResponse(href=link.href, rel=link.rel, method=link.method)
                for link in page.links
            ],
        )

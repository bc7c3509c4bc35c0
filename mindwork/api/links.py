"""HATEOAS navigation links for paged listings."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

import structlog
from fastapi import Request
from starlette.datastructures import URL
from starlette.routing import NoMatchFound

from mindwork.domain.pagination import Page

logger = structlog.get_logger()


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def page_href(base: URL, page_number: int, page_size: int, filters: Mapping[str, Any]) -> str:
    params = {"pageNumber": page_number, "pageSize": page_size}
    params.update({key: _query_value(value) for key, value in filters.items() if value is not None})
    return str(base.include_query_params(**params))


def add_page_links(
    page: Page[Any],
    request: Request,
    route_name: str,
    filters: Mapping[str, Any] | None = None,
) -> Page[Any]:
    """Attach self/next/previous links carrying every filter needed to reproduce a page.

    If the route cannot be resolved the page is returned without links.
    """
    filters = filters or {}
    try:
        base = request.url_for(route_name)
    except NoMatchFound:
        logger.warning("page_links_unavailable", route_name=route_name)
        return page

    page.add_link(page_href(base, page.page_number, page.page_size, filters), "self")
    if page.has_next:
        page.add_link(page_href(base, page.page_number + 1, page.page_size, filters), "next")
    if page.has_previous:
        page.add_link(page_href(base, page.page_number - 1, page.page_size, filters), "previous")
    return page

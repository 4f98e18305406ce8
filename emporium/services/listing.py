"""
Shared list/search/paginate algorithm.

Every list endpoint works the same way:

1. Build a filter from an optional search term over one field
   (case-insensitive substring) or no filter at all.
2. Turn the 1-based page number and page size into skip/limit.
3. Fetch the page and count all matches against the same filter.
4. Report results with currentPage, totalPages and totalCount.
"""

from __future__ import annotations

import asyncio
import math
import re
from dataclasses import dataclass
from typing import Any

from emporium.storage import Contains, DocumentStore, Filters

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class PageParams:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Page:
    results: list[dict[str, Any]]
    current_page: int
    total_pages: int
    total_count: int


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_positive(raw: Any, default: int) -> int:
    # Leading-integer parse: "3", " 3 ", "3.7" → 3; anything else → default
    if raw is None:
        return default
    match = _LEADING_INT.match(str(raw))
    if not match:
        return default
    return max(int(match.group(1)), 1)


def parse_page_params(page: Any = None, limit: Any = None) -> PageParams:
    """
    Read page/limit query values.

    Non-numeric values fall back to the defaults (page 1, limit 10);
    zero and negative values are clamped to 1.
    """
    return PageParams(
        page=_parse_positive(page, DEFAULT_PAGE),
        limit=_parse_positive(limit, DEFAULT_LIMIT),
    )


def search_filter(field: str, term: str | None) -> Filters:
    """Case-insensitive substring filter on one field, or no filter."""
    if term:
        return {field: Contains(term)}
    return {}


async def paginate(
    store: DocumentStore,
    collection: str,
    filters: Filters,
    params: PageParams,
) -> Page:
    """Fetch one page of matches plus the total match count."""
    results, total_count = await asyncio.gather(
        store.find(collection, filters, skip=params.skip, limit=params.limit),
        store.count(collection, filters),
    )
    return Page(
        results=results,
        current_page=params.page,
        total_pages=math.ceil(total_count / params.limit),
        total_count=total_count,
    )

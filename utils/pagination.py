# -*- coding: utf-8 -*-
"""Pagination and sorting normalisation for list endpoints.

Raw query values (usually strings, possibly garbage) are turned into a
:class:`PageOptions`. Bad input never raises; it falls back to the default.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 2
DEFAULT_SORT_BY = "createdAt"
DEFAULT_SORT_ORDER = "desc"
SORT_ORDERS = ("asc", "desc")


@dataclass(frozen=True)
class PageOptions:
    page: int
    limit: int
    skip: int
    sort_by: str
    sort_order: str


def _positive_int(raw: Any, default: int) -> int:
    if isinstance(raw, bool):
        return default
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def paginate_and_sort(
    options: Mapping[str, Any],
    default_limit: int = DEFAULT_LIMIT,
    sortable: frozenset[str] | set[str] | None = None,
) -> PageOptions:
    """Normalise ``page``/``limit``/``sortBy``/``sortOrder``.

    :param options: request args or any mapping with those keys.
    :param default_limit: page size used when ``limit`` is missing or invalid.
    :param sortable: allowed ``sortBy`` values; others fall back to ``createdAt``.
    """

    page = _positive_int(options.get("page"), DEFAULT_PAGE)
    limit = _positive_int(options.get("limit"), default_limit)
    skip = (page - 1) * limit

    sort_by = options.get("sortBy") or DEFAULT_SORT_BY
    if not isinstance(sort_by, str) or (sortable is not None and sort_by not in sortable):
        sort_by = DEFAULT_SORT_BY

    sort_order = str(options.get("sortOrder") or DEFAULT_SORT_ORDER).strip().lower()
    if sort_order not in SORT_ORDERS:
        sort_order = DEFAULT_SORT_ORDER

    return PageOptions(page=page, limit=limit, skip=skip, sort_by=sort_by, sort_order=sort_order)


def total_pages(total_count: int, limit: int | None) -> int:
    return math.ceil(total_count / (limit or DEFAULT_LIMIT))

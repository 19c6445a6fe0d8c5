"""Translate raw query-string parameters into typed store filters.

Every parser here is total: malformed input falls back to a default instead of
raising, so the HTTP layer never answers 4xx for a bad parameter.

Coercion table for ``parse_int``:

==================  =========
raw                 result
==================  =========
``None`` / ``""``   default
``"abc"``           default
``"5"`` / ``" 5 "`` 5
``"3.9"``           3
``"12abc"``         12
``"-2"``            -2
==================  =========
"""

from __future__ import annotations

import math
import re

from shared.models import MonthFilter, Pagination, SearchFilter, TransactionFilter


DEFAULT_MONTH = 3
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

_LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT_PATTERN = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_int(raw: object, default: int) -> int:
    """Return the leading integer of ``raw`` or ``default`` when there is none."""

    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        return raw
    if not isinstance(raw, str):
        return default

    match = _LEADING_INT_PATTERN.match(raw)
    if match is None:
        return default
    return int(match.group(1))


def parse_float(raw: object) -> float | None:
    """Return the leading finite float of a text or number, ``None`` when unparsable."""

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        match = _LEADING_FLOAT_PATTERN.match(raw)
        if match is None:
            return None
        value = float(match.group(1))
    else:
        return None

    if not math.isfinite(value):
        return None
    return value


def month_filter(month: int) -> MonthFilter:
    """Build the month predicate; 0 matches all, values outside 0-12 match nothing."""

    return MonthFilter(month=month)


def search_filter(text: str | None) -> SearchFilter:
    """Build the case-insensitive substring predicate; empty text matches all."""

    return SearchFilter(text=text or "")


def listing_filter(month: int, search: str | None) -> TransactionFilter:
    """Combine month and search predicates with a logical AND."""

    return TransactionFilter(month=month_filter(month), search=search_filter(search))


def pagination_params(page: object, limit: object) -> Pagination:
    """Return the skip/limit window for a 1-indexed page.

    Non-numeric or non-positive ``page`` selects the first page. Non-numeric
    or non-positive ``limit`` falls back to ``DEFAULT_LIMIT``.
    """

    parsed_limit = parse_int(limit, DEFAULT_LIMIT)
    if parsed_limit <= 0:
        parsed_limit = DEFAULT_LIMIT

    page_index = max(0, parse_int(page, DEFAULT_PAGE) - 1)
    return Pagination(skip=page_index * parsed_limit, limit=parsed_limit)


def parse_month(raw: object) -> int:
    """Coerce a raw month parameter, defaulting to ``DEFAULT_MONTH``."""

    return parse_int(raw, DEFAULT_MONTH)

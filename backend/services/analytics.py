"""Read-only sales analytics over the transactions repository."""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable

from backend.repositories.transactions_repository import TransactionsRepository
from backend.services.query_builder import (
    listing_filter,
    month_filter,
    pagination_params,
    parse_float,
)
from shared.models import CombinedData, SalesStatistics, TransactionFilter, TransactionsPage


logger = logging.getLogger(__name__)


PRICE_RANGE_LABELS: tuple[str, ...] = (
    "0-100",
    "101-200",
    "201-300",
    "301-400",
    "401-500",
    "501-600",
    "601-700",
    "701-800",
    "801-900",
    "901-above",
)
_BUCKET_WIDTH = 100
MISSING_CATEGORY_KEY = "null"


def price_range_label(price: float) -> str:
    """Return the bar-chart bucket for a price; upper bounds are inclusive."""

    if price <= _BUCKET_WIDTH:
        return PRICE_RANGE_LABELS[0]
    index = min(math.ceil(price / _BUCKET_WIDTH) - 1, len(PRICE_RANGE_LABELS) - 1)
    return PRICE_RANGE_LABELS[index]


def compute_statistics(rows: Iterable[dict[str, Any]]) -> SalesStatistics:
    total_count = 0
    sold_count = 0
    total_sale = 0.0
    for row in rows:
        total_count += 1
        if row.get("sold"):
            sold_count += 1
            total_sale += parse_float(row.get("price")) or 0.0

    rounded = Decimal(total_sale).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return SalesStatistics(
        total_count=total_count,
        total_sale=f"{rounded:.2f}",
        sold_count=sold_count,
        unsold_count=total_count - sold_count,
    )


def bucket_prices(rows: Iterable[dict[str, Any]]) -> dict[str, int]:
    """Count prices per fixed range; every range is present, null prices are skipped."""

    counts = {label: 0 for label in PRICE_RANGE_LABELS}
    for row in rows:
        raw_price = row.get("price")
        if raw_price is None:
            continue
        counts[price_range_label(parse_float(raw_price) or 0.0)] += 1
    return counts


def count_categories(rows: Iterable[dict[str, Any]]) -> dict[str, int]:
    """Count records per observed category; missing categories share the ``"null"`` key."""

    counts: dict[str, int] = {}
    for row in rows:
        category = row.get("category")
        key = MISSING_CATEGORY_KEY if category is None else str(category)
        counts[key] = counts.get(key, 0) + 1
    return counts


@dataclass(slots=True)
class AnalyticsService:
    transactions_repository: TransactionsRepository

    async def _project(self, filters: TransactionFilter, fields: tuple[str, ...]) -> list[dict[str, Any]]:
        return await asyncio.to_thread(
            self.transactions_repository.project_transactions, filters, fields
        )

    async def list_transactions(
        self,
        *,
        month: int,
        search: str | None = None,
        page: object = None,
        limit: object = None,
    ) -> TransactionsPage:
        filters = listing_filter(month, search)
        pagination = pagination_params(page, limit)

        records, total_count = await asyncio.gather(
            asyncio.to_thread(self.transactions_repository.find_transactions, filters, pagination),
            asyncio.to_thread(self.transactions_repository.count_transactions, filters),
        )
        logger.info(
            "transactions_listed month=%s skip=%s limit=%s returned=%s total=%s",
            month,
            pagination.skip,
            pagination.limit,
            len(records),
            total_count,
        )
        return TransactionsPage(
            total_count=total_count,
            page=pagination.page,
            limit=pagination.limit,
            month=month,
            transactions=records,
        )

    async def statistics(self, month: int) -> SalesStatistics:
        filters = TransactionFilter(month=month_filter(month))
        rows = await self._project(filters, ("price", "sold"))
        return compute_statistics(rows)

    async def bar_chart(self, month: int) -> dict[str, int]:
        filters = TransactionFilter(month=month_filter(month))
        rows = await self._project(filters, ("price",))
        return bucket_prices(rows)

    async def pie_chart(self, month: int) -> dict[str, int]:
        filters = TransactionFilter(month=month_filter(month))
        rows = await self._project(filters, ("category",))
        return count_categories(rows)

    async def combined(self, month: int) -> CombinedData:
        """Run statistics, bar and pie charts concurrently; the first failure propagates."""

        stats, bar_chart, pie_chart = await asyncio.gather(
            self.statistics(month),
            self.bar_chart(month),
            self.pie_chart(month),
        )
        return CombinedData(stats_data=stats, bar_chart_data=bar_chart, pie_chart_data=pie_chart)

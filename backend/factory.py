"""Composition root for backend services."""

from __future__ import annotations

import logging

from backend.db.postgrest_client import PostgrestClient, PostgrestSettings
from backend.repositories.transactions_repository import (
    PostgrestTransactionsRepository,
    TransactionsRepository,
    UnavailableTransactionsRepository,
)
from backend.services.analytics import AnalyticsService
from shared import config


logger = logging.getLogger(__name__)


def build_transactions_repository() -> TransactionsRepository:
    """Build the store handle once from configuration.

    A missing connection string is logged and replaced by a repository whose
    queries fail, so the process still starts and serves errors.
    """

    url = config.store_url()
    if not url:
        logger.error("store_not_configured env=SALES_STORE_URL; every query will fail")
        return UnavailableTransactionsRepository(
            "Record store is not configured: define SALES_STORE_URL"
        )

    client = PostgrestClient(settings=PostgrestSettings(url=url, api_key=config.store_api_key()))
    table = config.store_table()
    try:
        client.ping(table=table)
    except Exception:
        logger.exception("store_connect_failed table=%s", table)
    else:
        logger.info("store_connected table=%s", table)
    return PostgrestTransactionsRepository(client=client, table=table)


def build_analytics_service(
    transactions_repository: TransactionsRepository | None = None,
) -> AnalyticsService:
    return AnalyticsService(
        transactions_repository=transactions_repository or build_transactions_repository()
    )

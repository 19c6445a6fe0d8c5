"""Transactions repository adapters.

All adapters are read-only views over the sales-transaction collection. The
PostgREST adapter expects a ``sale_month`` generated column next to
``date_of_sale`` so month filtering can be pushed down to the store.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol

from backend.db.postgrest_client import PostgrestClient, StoreNotConfiguredError, StoreRequestError
from shared.models import Pagination, TransactionFilter, TransactionRecord


RECORD_COLUMNS: tuple[str, ...] = (
    "id",
    "title",
    "description",
    "price",
    "category",
    "image",
    "date_of_sale",
    "sold",
)


class TransactionsRepository(Protocol):
    def find_transactions(
        self, filters: TransactionFilter, pagination: Pagination
    ) -> list[TransactionRecord]:
        """Return one page of matching transactions."""

    def count_transactions(self, filters: TransactionFilter) -> int:
        """Return the number of matching transactions, ignoring pagination."""

    def project_transactions(
        self, filters: TransactionFilter, fields: tuple[str, ...]
    ) -> list[dict[str, Any]]:
        """Return only ``fields`` for every matching transaction."""


class InMemoryTransactionsRepository:
    """In-memory repository used by tests/dev."""

    def __init__(self, records: Iterable[TransactionRecord] = ()) -> None:
        self._records: list[TransactionRecord] = list(records)

    @staticmethod
    def _matches(record: TransactionRecord, filters: TransactionFilter) -> bool:
        month = filters.month
        if month.matches_none:
            return False
        if not month.matches_all:
            if record.date_of_sale is None or record.date_of_sale.month != month.month:
                return False

        search = filters.search
        if search.matches_all:
            return True
        needle = search.text.lower()
        for field_name in search.fields:
            value = getattr(record, field_name, None)
            if value is not None and needle in str(value).lower():
                return True
        return False

    def _filter_rows(self, filters: TransactionFilter) -> list[TransactionRecord]:
        return [record for record in self._records if self._matches(record, filters)]

    def find_transactions(
        self, filters: TransactionFilter, pagination: Pagination
    ) -> list[TransactionRecord]:
        rows = self._filter_rows(filters)
        return rows[pagination.skip : pagination.skip + pagination.limit]

    def count_transactions(self, filters: TransactionFilter) -> int:
        return len(self._filter_rows(filters))

    def project_transactions(
        self, filters: TransactionFilter, fields: tuple[str, ...]
    ) -> list[dict[str, Any]]:
        return [
            {field_name: getattr(record, field_name, None) for field_name in fields}
            for record in self._filter_rows(filters)
        ]


class PostgrestTransactionsRepository:
    """PostgREST repository reading transactions from a single table."""

    def __init__(self, client: PostgrestClient, table: str = "transactions") -> None:
        self._client = client
        self._table = table

    @staticmethod
    def _quote(value: str) -> str:
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'

    @staticmethod
    def _escape_like(value: str) -> str:
        """Escape LIKE wildcards and the PostgREST ``*`` so the text matches literally."""

        escaped = value.replace("\\", "\\\\")
        for wildcard in ("%", "_", "*"):
            escaped = escaped.replace(wildcard, f"\\{wildcard}")
        return escaped

    def _build_query(self, filters: TransactionFilter) -> list[tuple[str, str | int]]:
        query: list[tuple[str, str | int]] = []

        if not filters.month.matches_all:
            query.append(("sale_month", f"eq.{filters.month.month}"))

        if not filters.search.matches_all:
            pattern = self._quote(f"*{self._escape_like(filters.search.text)}*")
            conditions = ",".join(f"{field_name}.ilike.{pattern}" for field_name in filters.search.fields)
            query.append(("or", f"({conditions})"))

        return query

    def find_transactions(
        self, filters: TransactionFilter, pagination: Pagination
    ) -> list[TransactionRecord]:
        query = [
            *self._build_query(filters),
            ("select", ",".join(RECORD_COLUMNS)),
            ("order", "id.asc"),
            ("limit", pagination.limit),
            ("offset", pagination.skip),
        ]
        rows, _ = self._client.get_rows(table=self._table, query=query, with_count=False)
        return [TransactionRecord.model_validate(row) for row in rows]

    def count_transactions(self, filters: TransactionFilter) -> int:
        query = [*self._build_query(filters), ("select", "id"), ("limit", 1)]
        _, total = self._client.get_rows(table=self._table, query=query, with_count=True)
        if total is None:
            raise StoreRequestError("Record store did not report an exact count")
        return total

    def project_transactions(
        self, filters: TransactionFilter, fields: tuple[str, ...]
    ) -> list[dict[str, Any]]:
        query = [*self._build_query(filters), ("select", ",".join(fields))]
        rows, _ = self._client.get_rows(table=self._table, query=query, with_count=False)
        return [{field_name: row.get(field_name) for field_name in fields} for row in rows]


class UnavailableTransactionsRepository:
    """Stand-in used when no store is configured; every query fails."""

    def __init__(self, reason: str) -> None:
        self.reason = reason

    def _fail(self) -> Any:
        raise StoreNotConfiguredError(self.reason)

    def find_transactions(
        self, filters: TransactionFilter, pagination: Pagination
    ) -> list[TransactionRecord]:
        return self._fail()

    def count_transactions(self, filters: TransactionFilter) -> int:
        return self._fail()

    def project_transactions(
        self, filters: TransactionFilter, fields: tuple[str, ...]
    ) -> list[dict[str, Any]]:
        return self._fail()

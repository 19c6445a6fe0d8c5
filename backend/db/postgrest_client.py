"""Minimal read-only PostgREST client used by the transactions repository."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen


class StoreNotConfiguredError(RuntimeError):
    """Raised when the record store connection string is missing."""


class StoreRequestError(RuntimeError):
    """Raised when the record store cannot answer a query."""


@dataclass(slots=True)
class PostgrestSettings:
    url: str
    api_key: str | None = None


class PostgrestClient:
    def __init__(self, settings: PostgrestSettings) -> None:
        self.settings = settings

    def _headers(self, *, with_count: bool) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Prefer": "count=exact" if with_count else "return=representation",
        }
        if self.settings.api_key:
            headers["apikey"] = self.settings.api_key
            headers["Authorization"] = f"Bearer {self.settings.api_key}"
        return headers

    def _base_url(self) -> str:
        base = self.settings.url.rstrip("/")
        # Supabase projects expose PostgREST under /rest/v1.
        if ".supabase.co" in base and not base.endswith("/rest/v1"):
            base = f"{base}/rest/v1"
        return base

    def get_rows(
        self,
        *,
        table: str,
        query: dict[str, str | int] | list[tuple[str, str | int]],
        with_count: bool,
    ) -> tuple[list[dict[str, Any]], int | None]:
        """Fetch rows from PostgREST and optionally parse exact row count."""

        encoded_query = urlencode(query, doseq=True)
        request = Request(
            url=f"{self._base_url()}/{table}?{encoded_query}",
            headers=self._headers(with_count=with_count),
            method="GET",
        )
        try:
            with urlopen(request) as response:  # noqa: S310 - URL comes from trusted env config
                rows = json.loads(response.read().decode("utf-8"))
                total: int | None = None
                if with_count:
                    content_range = response.headers.get("content-range")
                    if content_range and "/" in content_range:
                        _, total_str = content_range.split("/", maxsplit=1)
                        if total_str.isdigit():
                            total = int(total_str)
                return rows, total
        except HTTPError as exc:
            body = exc.read().decode("utf-8", errors="replace")[:500]
            raise StoreRequestError(
                f"Record store request failed with status {exc.code}: {body}"
            ) from exc
        except URLError as exc:
            raise StoreRequestError(f"Record store unreachable: {exc.reason}") from exc

    def ping(self, *, table: str) -> None:
        """Issue a one-row query so connectivity problems surface at startup."""

        self.get_rows(table=table, query=[("select", "id"), ("limit", 1)], with_count=False)

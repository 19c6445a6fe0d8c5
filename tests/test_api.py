"""HTTP contract tests for the analytics endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

import backend.api as api
from backend.api import app
from backend.repositories.transactions_repository import UnavailableTransactionsRepository
from backend.services.analytics import AnalyticsService
from tests.fakes import FailingTransactionsRepository, build_fixed_repository


client = TestClient(app)


def _use_repository(monkeypatch, repository) -> None:
    service = AnalyticsService(transactions_repository=repository)
    monkeypatch.setattr(api, "get_analytics_service", lambda: service)


def test_health_does_not_touch_the_store() -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_transactions_defaults_to_march_first_page(monkeypatch) -> None:
    _use_repository(monkeypatch, build_fixed_repository())

    response = client.get("/transactions")

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["totalCount"] == 4
    assert payload["page"] == 1
    assert payload["limit"] == 10
    assert payload["month"] == 3
    assert {row["id"] for row in payload["transactions"]} == {"1", "2", "3", "8"}
    assert set(payload["transactions"][0]) >= {"title", "description", "price", "category", "dateOfSale", "sold"}


def test_transactions_search_is_case_insensitive(monkeypatch) -> None:
    _use_repository(monkeypatch, build_fixed_repository())

    response = client.get("/transactions", params={"search": "bat", "month": "3"})

    payload = response.json()
    assert payload["totalCount"] == 1
    assert payload["transactions"][0]["title"] == "Baseball bat"


def test_transactions_coerces_malformed_params_instead_of_rejecting(monkeypatch) -> None:
    _use_repository(monkeypatch, build_fixed_repository())

    response = client.get("/transactions", params={"page": "abc", "limit": "abc", "month": "abc"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["page"] == 1
    assert payload["limit"] == 10
    assert payload["month"] == 3


def test_transactions_pages_cover_total_count(monkeypatch) -> None:
    _use_repository(monkeypatch, build_fixed_repository())

    pages = [
        client.get("/transactions", params={"month": "0", "limit": "3", "page": str(page)}).json()
        for page in (1, 2, 3)
    ]

    assert [page["page"] for page in pages] == [1, 2, 3]
    assert sum(len(page["transactions"]) for page in pages) == pages[0]["totalCount"] == 8


def test_statistics_endpoint_shape(monkeypatch) -> None:
    _use_repository(monkeypatch, build_fixed_repository())

    response = client.get("/statistics", params={"month": "5"})

    assert response.status_code == 200
    assert response.json() == {
        "totalCount": 3,
        "totalSale": "1167.99",
        "soldCount": 2,
        "unsoldCount": 1,
    }


def test_statistics_for_month_without_sales(monkeypatch) -> None:
    _use_repository(monkeypatch, build_fixed_repository())

    response = client.get("/statistics", params={"month": "13"})

    assert response.json() == {"totalCount": 0, "totalSale": "0.00", "soldCount": 0, "unsoldCount": 0}


def test_bar_chart_endpoint_returns_ten_ranges(monkeypatch) -> None:
    _use_repository(monkeypatch, build_fixed_repository())

    payload = client.get("/bar-chart").json()

    assert len(payload) == 10
    assert payload["0-100"] == 3
    assert payload["101-200"] == 1
    assert payload["901-above"] == 0


def test_pie_chart_endpoint_omits_absent_categories(monkeypatch) -> None:
    _use_repository(monkeypatch, build_fixed_repository())

    payload = client.get("/pie-chart", params={"month": "3"}).json()
    listed = client.get("/transactions", params={"month": "3"}).json()

    assert payload == {"men's clothing": 2, "sports": 1, "null": 1}
    assert sum(payload.values()) == listed["totalCount"]


def test_combined_data_merges_sub_results_verbatim(monkeypatch) -> None:
    _use_repository(monkeypatch, build_fixed_repository())

    combined = client.get("/combined-data", params={"month": "5"}).json()

    assert combined == {
        "statsData": client.get("/statistics", params={"month": "5"}).json(),
        "barChartData": client.get("/bar-chart", params={"month": "5"}).json(),
        "pieChartData": client.get("/pie-chart", params={"month": "5"}).json(),
    }


def test_store_failures_return_500_with_error_message(monkeypatch) -> None:
    _use_repository(monkeypatch, FailingTransactionsRepository(RuntimeError("store timeout")))

    for path in ("/transactions", "/statistics", "/bar-chart", "/pie-chart", "/combined-data"):
        response = client.get(path)

        assert response.status_code == 500
        assert response.json() == {"error": "store timeout"}


def test_unconfigured_store_surfaces_configuration_error(monkeypatch) -> None:
    _use_repository(monkeypatch, UnavailableTransactionsRepository("Record store is not configured"))

    response = client.get("/statistics")

    assert response.status_code == 500
    assert response.json() == {"error": "Record store is not configured"}

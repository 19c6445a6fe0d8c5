"""FastAPI entrypoint for the sales analytics endpoints."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import JSONResponse

from backend.factory import build_analytics_service
from backend.services.analytics import AnalyticsService
from backend.services.query_builder import parse_month
from shared import config as _config


logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_analytics_service() -> AnalyticsService:
    """Create and cache the analytics service once per process."""

    return build_analytics_service()


def _error_response(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "analytics_request_failed path=%s exception_type=%s",
        request.url.path,
        type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"error": str(exc)})


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Build the store handle at startup so configuration problems are logged early."""

    get_analytics_service()
    yield


app = FastAPI(title="Sales Analytics API", lifespan=lifespan)

ALLOW_ORIGINS = _config.cors_allow_origins()


@app.middleware("http")
async def log_http_requests(request: Request, call_next):
    """Log incoming requests, HTTP status codes and unexpected errors."""

    logger.info("http_request_received method=%s path=%s", request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "http_request_failed method=%s path=%s",
            request.method,
            request.url.path,
        )
        raise

    logger.info(
        "http_response_sent method=%s path=%s status_code=%s",
        request.method,
        request.url.path,
        response.status_code,
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info("cors_allow_origins=%s", ALLOW_ORIGINS)


@app.exception_handler(Exception)
async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for unhandled exceptions."""

    return _error_response(request, exc)


@app.get("/health")
def health() -> dict[str, str]:
    """Healthcheck endpoint."""

    return {"status": "ok"}


@app.get("/transactions")
async def list_transactions(
    request: Request,
    page: str | None = None,
    limit: str | None = None,
    search: str | None = None,
    month: str | None = None,
):
    try:
        result = await get_analytics_service().list_transactions(
            month=parse_month(month),
            search=search,
            page=page,
            limit=limit,
        )
    except Exception as exc:
        return _error_response(request, exc)
    return result.model_dump(mode="json", by_alias=True)


@app.get("/statistics")
async def get_statistics(request: Request, month: str | None = None):
    try:
        result = await get_analytics_service().statistics(parse_month(month))
    except Exception as exc:
        return _error_response(request, exc)
    return result.model_dump(mode="json", by_alias=True)


@app.get("/bar-chart")
async def get_bar_chart(request: Request, month: str | None = None):
    try:
        return await get_analytics_service().bar_chart(parse_month(month))
    except Exception as exc:
        return _error_response(request, exc)


@app.get("/pie-chart")
async def get_pie_chart(request: Request, month: str | None = None):
    try:
        return await get_analytics_service().pie_chart(parse_month(month))
    except Exception as exc:
        return _error_response(request, exc)


@app.get("/combined-data")
async def get_combined_data(request: Request, month: str | None = None):
    try:
        result = await get_analytics_service().combined(parse_month(month))
    except Exception as exc:
        return _error_response(request, exc)
    return result.model_dump(mode="json", by_alias=True)

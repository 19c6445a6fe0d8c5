"""Configuration helpers for environment variables."""

from __future__ import annotations

import os
import logging

from dotenv import load_dotenv


logger = logging.getLogger(__name__)


_DEFAULT_STORE_TABLE = "transactions"
_DEFAULT_PORT = 8000


def _should_load_dotenv() -> bool:
    """Return whether local dotenv loading should run."""
    app_env = os.getenv("APP_ENV", "dev").strip().lower()
    return app_env in {"dev", "local"}


if _should_load_dotenv():
    load_dotenv()


def get_env(name: str, default: str | None = None) -> str | None:
    """Return a raw environment value or default."""
    return os.getenv(name, default)


def app_env() -> str:
    """Return the current application environment."""
    return (get_env("APP_ENV", "dev") or "dev").strip() or "dev"


def cors_allow_origins() -> list[str]:
    """Return CORS allowed origins from env with safe environment defaults."""
    raw_origins = get_env("CORS_ALLOW_ORIGINS", "") or ""
    parsed_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]

    if parsed_origins:
        return parsed_origins

    if app_env().strip().lower() in {"dev", "local"}:
        return ["http://localhost:5173", "http://127.0.0.1:5173", "http://localhost:3000"]

    ui_origin = (get_env("UI_ORIGIN", "") or "").strip()
    if ui_origin:
        return [ui_origin]

    logger.warning(
        "cors_allow_origins_empty_in_prod app_env=%s; define CORS_ALLOW_ORIGINS or UI_ORIGIN",
        app_env(),
    )

    return []


def store_url() -> str | None:
    """Return the record store connection string when configured."""
    value = (get_env("SALES_STORE_URL", "") or "").strip()
    return value or None


def store_api_key() -> str | None:
    """Return the optional record store API key."""
    value = (get_env("SALES_STORE_API_KEY", "") or "").strip()
    return value or None


def store_table() -> str:
    """Return the table holding sales transactions."""
    return (get_env("SALES_STORE_TABLE", _DEFAULT_STORE_TABLE) or _DEFAULT_STORE_TABLE).strip() or _DEFAULT_STORE_TABLE


def port() -> int:
    """Return the HTTP port used by the server entrypoint."""
    raw_value = (get_env("PORT", "") or "").strip()
    try:
        return int(raw_value)
    except ValueError:
        return _DEFAULT_PORT


def log_level() -> str:
    """Return the configured root log level name."""
    return (get_env("LOG_LEVEL", "INFO") or "INFO").strip().upper() or "INFO"

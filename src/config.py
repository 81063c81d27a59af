# src/config.py

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_BASE_URL = "http://localhost:3000"


@dataclass(frozen=True)
class AppConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: int = 20
    default_origin: str = "GRU"
    default_destination: str = "LIS"
    default_days_ahead: int = 30
    default_provider: str = "amadeus"
    log_level: str = "INFO"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be greater than 0")
    return value


def load_config() -> AppConfig:
    """
    Settings from the environment (a local .env is honoured).
    Credentials for Amadeus/Tequila live with the /api/search backend, not here.
    """
    load_dotenv()
    return AppConfig(
        base_url=(os.getenv("FLIGHT_SEARCH_BASE_URL", "") or DEFAULT_BASE_URL).strip().rstrip("/"),
        timeout_seconds=_int_env("FLIGHT_SEARCH_TIMEOUT_S", 20),
        default_origin=os.getenv("FLIGHT_SEARCH_DEFAULT_ORIGIN", "GRU").strip().upper(),
        default_destination=os.getenv("FLIGHT_SEARCH_DEFAULT_DESTINATION", "LIS").strip().upper(),
        default_days_ahead=_int_env("FLIGHT_SEARCH_DEFAULT_DAYS_AHEAD", 30),
        default_provider=os.getenv("FLIGHT_SEARCH_DEFAULT_PROVIDER", "amadeus").strip().lower(),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

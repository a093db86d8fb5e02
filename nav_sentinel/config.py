"""Central configuration for the NAV sentinel package."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from decimal import Context, Decimal
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"
HISTORY_DIR = DATA_DIR / "history"
LOG_DIR = BASE_DIR / "logs"

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"


@dataclass(slots=True, frozen=True)
class Settings:
    decimal_context: Context
    nav_tolerance_pct: Decimal
    min_monetary_values: int
    error_penalty: int
    warning_penalty: int
    reasoning_api_key: str | None
    reasoning_model: str
    reasoning_timeout_seconds: float
    reasoning_max_tokens: int
    prompt_text_limit: int
    unparsed_response_confidence: int
    max_upload_bytes: int
    enable_history: bool
    history_dir: Path
    log_level: str
    log_dir: Path

    @property
    def reasoning_enabled(self) -> bool:
        return bool(self.reasoning_api_key)


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(value: str | None, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _as_float(value: str | None, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _as_log_level(value: str | None, default: str) -> str:
    if value is None or value.strip() == "":
        return default
    level = value.strip().upper()
    return level if isinstance(logging.getLevelName(level), int) else default


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    if environ is None:
        load_dotenv()
        environ = os.environ
    return Settings(
        decimal_context=Context(prec=28),
        nav_tolerance_pct=Decimal("0.01"),
        min_monetary_values=4,
        error_penalty=20,
        warning_penalty=5,
        reasoning_api_key=environ.get("ANTHROPIC_API_KEY") or None,
        reasoning_model=environ.get("NAV_SENTINEL_MODEL") or DEFAULT_MODEL,
        reasoning_timeout_seconds=_as_float(environ.get("NAV_SENTINEL_TIMEOUT_SECONDS"), 30.0),
        reasoning_max_tokens=_as_int(environ.get("NAV_SENTINEL_MAX_TOKENS"), 1500),
        prompt_text_limit=2000,
        unparsed_response_confidence=50,
        max_upload_bytes=10 * 1024 * 1024,
        enable_history=_as_bool(environ.get("NAV_SENTINEL_HISTORY"), True),
        history_dir=Path(environ.get("NAV_SENTINEL_HISTORY_DIR") or HISTORY_DIR),
        log_level=_as_log_level(environ.get("NAV_SENTINEL_LOG_LEVEL"), "INFO"),
        log_dir=Path(environ.get("NAV_SENTINEL_LOG_DIR") or LOG_DIR),
    )


SETTINGS = load_settings()

"""Logging configuration and the reasoning interaction audit log."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from nav_sentinel.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LLM_LOGGER_NAME = "nav_sentinel.llm"

llm_logger = logging.getLogger(LLM_LOGGER_NAME)


def configure_logging(settings: Settings, to_files: bool = True) -> None:
    """Console output plus all/error logs and a JSON-lines LLM interaction log."""
    root = logging.getLogger("nav_sentinel")
    root.setLevel(settings.log_level)
    if root.handlers:
        return

    formatter = logging.Formatter(LOG_FORMAT)
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if not to_files:
        return
    settings.log_dir.mkdir(parents=True, exist_ok=True)

    all_handler = logging.FileHandler(settings.log_dir / "all.log", encoding="utf-8")
    all_handler.setFormatter(formatter)
    root.addHandler(all_handler)

    error_handler = logging.FileHandler(settings.log_dir / "error.log", encoding="utf-8")
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)
    root.addHandler(error_handler)

    interactions = logging.FileHandler(settings.log_dir / "llm-interactions.log", encoding="utf-8")
    interactions.setFormatter(logging.Formatter("%(message)s"))
    llm_logger.addHandler(interactions)
    llm_logger.setLevel(logging.INFO)
    llm_logger.propagate = False


def log_llm_interaction(operation: str, payload: Any, response: Any, model: str) -> None:
    entry = {
        "operation": operation,
        "model": model,
        "input": payload,
        "output": response,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    llm_logger.info(json.dumps(entry, default=str, ensure_ascii=False))

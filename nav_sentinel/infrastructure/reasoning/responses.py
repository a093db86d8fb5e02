"""Defensive parsing of semi-structured model replies."""
from __future__ import annotations

import json
import re
from decimal import Decimal
from typing import Any, Mapping

from nav_sentinel.domain.analysis.entities import SEVERITIES, Severity
from nav_sentinel.infrastructure.parsing.utils import parse_decimal

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)


def _load_object(candidate: str) -> dict[str, Any] | None:
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        start, end = candidate.find("{"), candidate.rfind("}")
        if start == -1 or end <= start:
            return None
        try:
            data = json.loads(candidate[start : end + 1])
        except json.JSONDecodeError:
            return None
    return data if isinstance(data, dict) else None


def parse_json_object(text: str) -> dict[str, Any] | None:
    """Return the first JSON object in a reply, fenced or bare, or None."""
    if not text:
        return None
    for match in _FENCED_JSON.finditer(text):
        data = _load_object(match.group(1))
        if data is not None:
            return data
    return _load_object(text.strip())


def as_text(payload: Mapping[str, Any], key: str, default: str = "") -> str:
    value = payload.get(key)
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def as_text_list(payload: Mapping[str, Any], key: str) -> tuple[str, ...]:
    value = payload.get(key)
    if value is None:
        return tuple()
    if isinstance(value, str):
        return (value,) if value.strip() else tuple()
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in value if item is not None and str(item).strip())
    return (str(value),)


def as_decimal(payload: Mapping[str, Any], key: str, default: Decimal) -> Decimal:
    value = payload.get(key)
    if value is None or isinstance(value, bool):
        return default
    parsed = parse_decimal(value)
    return parsed if parsed > 0 else default


def as_confidence(payload: Mapping[str, Any], key: str, default: int) -> int:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return default
    text = str(value).replace("%", "")
    if not any(ch.isdigit() for ch in text):
        return default
    return max(0, min(100, int(parse_decimal(text))))


def as_bool(payload: Mapping[str, Any], key: str, default: bool) -> bool:
    value = payload.get(key)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes"}:
            return True
        if lowered in {"false", "no"}:
            return False
    return default


def as_severity(payload: Mapping[str, Any], key: str, default: Severity) -> Severity:
    value = payload.get(key)
    if isinstance(value, str):
        lowered = value.strip().lower()
        for severity in SEVERITIES:
            if lowered == severity:
                return severity
    return default

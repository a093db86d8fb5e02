"""Domain-level results for NAV record validation."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking one record.

    ``confidence`` is a linear penalty score, a heuristic proxy rather than a
    calibrated probability.
    """

    is_valid: bool
    confidence: int
    errors: Sequence[str] = field(default_factory=tuple)
    warnings: Sequence[str] = field(default_factory=tuple)

    def has_issues(self) -> bool:
        return bool(self.errors or self.warnings)

    def iter_issues(self) -> Iterable[tuple[str, str]]:
        for message in self.errors:
            yield "error", message
        for message in self.warnings:
            yield "warning", message

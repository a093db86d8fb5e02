"""Analysis entities returned by the reconstruction, comparison and explanation steps."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Literal, Sequence

Severity = Literal["low", "medium", "high", "critical"]
ResultSource = Literal["reasoning_service", "unparsed_response", "fallback"]

SEVERITIES: tuple[Severity, ...] = ("low", "medium", "high", "critical")
FALLBACK_MODEL = "fallback"


@dataclass(frozen=True)
class Reconstruction:
    reconstructed_nav: Decimal
    confidence: int
    notes: str
    model: str
    generated_at: datetime
    source: ResultSource
    calculation_steps: Sequence[str] = field(default_factory=tuple)
    potential_issues: Sequence[str] = field(default_factory=tuple)


@dataclass(frozen=True)
class Comparison:
    severity: Severity
    explanation: str
    requires_investigation: bool
    model: str
    generated_at: datetime
    source: ResultSource
    anomalies: Sequence[str] = field(default_factory=tuple)
    recommendations: Sequence[str] = field(default_factory=tuple)


@dataclass(frozen=True)
class Explanation:
    text: str
    model: str
    generated_at: datetime
    source: ResultSource


@dataclass(frozen=True)
class FullAnalysis:
    """The three analysis steps for one record."""

    fund_name: str
    date: str
    official_nav: Decimal
    reconstruction: Reconstruction
    comparison: Comparison
    explanation: Explanation

    def summary(self) -> dict[str, object]:
        return {
            "fund_name": self.fund_name,
            "date": self.date,
            "official_nav": self.official_nav,
            "reconstructed_nav": self.reconstruction.reconstructed_nav,
            "confidence": self.reconstruction.confidence,
            "severity": self.comparison.severity,
            "requires_investigation": self.comparison.requires_investigation,
        }

    def used_fallback(self) -> bool:
        return any(
            step.source != "reasoning_service"
            for step in (self.reconstruction, self.comparison, self.explanation)
        )

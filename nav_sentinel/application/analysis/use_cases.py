"""Reconstruction, comparison and explanation of a record by the reasoning service.

Every step degrades instead of failing: without a configured service, or when
the service errors, the result is derived from the record itself and labeled
``source="fallback"``; a reply that is not a JSON object is kept verbatim as
notes and labeled ``source="unparsed_response"``.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable

from nav_sentinel.application.use_cases import validator_from_settings
from nav_sentinel.config import Settings
from nav_sentinel.domain.analysis.entities import (
    FALLBACK_MODEL,
    Comparison,
    Explanation,
    FullAnalysis,
    Reconstruction,
)
from nav_sentinel.domain.models import FinancialRecord
from nav_sentinel.domain.repositories import ReasoningService
from nav_sentinel.domain.services import NavRecordValidator
from nav_sentinel.infrastructure.reasoning.client import ReasoningServiceError
from nav_sentinel.infrastructure.reasoning.prompts import (
    comparison_prompt,
    explanation_prompt,
    money,
    per_unit,
    quantity,
    reconstruction_prompt,
    system_prompt,
)
from nav_sentinel.infrastructure.reasoning.responses import (
    as_bool,
    as_confidence,
    as_decimal,
    as_severity,
    as_text,
    as_text_list,
    parse_json_object,
)
from nav_sentinel.logging_setup import log_llm_interaction

logger = logging.getLogger(__name__)

UNAVAILABLE_NOTE = "Reasoning service unavailable; result derived from the extracted figures."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnalyzeNavUseCase:
    def __init__(
        self,
        reasoning: ReasoningService | None,
        validator: NavRecordValidator,
        prompt_text_limit: int = 2000,
        unparsed_confidence: int = 50,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._reasoning = reasoning
        self._validator = validator
        self._prompt_text_limit = prompt_text_limit
        self._unparsed_confidence = unparsed_confidence
        self._clock = clock
        self._system = system_prompt(validator.tolerance_pct)

    @classmethod
    def from_settings(cls, settings: Settings, reasoning: ReasoningService | None) -> "AnalyzeNavUseCase":
        return cls(
            reasoning,
            validator_from_settings(settings),
            prompt_text_limit=settings.prompt_text_limit,
            unparsed_confidence=settings.unparsed_response_confidence,
        )

    @property
    def reasoning_available(self) -> bool:
        return self._reasoning is not None

    def run(self, record: FinancialRecord) -> FullAnalysis:
        logger.info("Full NAV analysis requested for %r (%s)", record.fund_name, record.date)
        reconstruction = self.reconstruct(record)
        explanation = self.explain(record)
        comparison = self.compare(record, reconstruction)
        analysis = FullAnalysis(
            fund_name=record.fund_name,
            date=record.date,
            official_nav=record.official_nav,
            reconstruction=reconstruction,
            comparison=comparison,
            explanation=explanation,
        )
        logger.info(
            "Full NAV analysis completed for %r: confidence=%d severity=%s",
            record.fund_name,
            reconstruction.confidence,
            comparison.severity,
        )
        return analysis

    def reconstruct(self, record: FinancialRecord) -> Reconstruction:
        reply = self._ask("nav_reconstruction", reconstruction_prompt(record, self._prompt_text_limit))
        if reply is None:
            validation = self._validator.validate(record)
            return Reconstruction(
                reconstructed_nav=record.nav_per_unit,
                confidence=validation.confidence,
                notes=UNAVAILABLE_NOTE,
                model=FALLBACK_MODEL,
                generated_at=self._clock(),
                source="fallback",
                calculation_steps=(
                    f"Net assets = {money(record.total_assets)} - {money(record.total_liabilities)}"
                    f" = {money(record.net_assets)}",
                    f"NAV per unit = {money(record.net_assets)} / {quantity(record.units_outstanding)}"
                    f" = {per_unit(record.nav_per_unit)}",
                ),
                potential_issues=tuple(validation.errors) + tuple(validation.warnings),
            )

        model = self._model()
        payload = parse_json_object(reply)
        if payload is None:
            logger.warning("Failed to parse reconstruction JSON response, using text response")
            return Reconstruction(
                reconstructed_nav=record.nav_per_unit,
                confidence=self._unparsed_confidence,
                notes=reply,
                model=model,
                generated_at=self._clock(),
                source="unparsed_response",
                calculation_steps=("Used extracted NAV per unit",),
                potential_issues=("Could not parse structured response",),
            )

        return Reconstruction(
            reconstructed_nav=as_decimal(payload, "reconstructedNav", record.nav_per_unit),
            confidence=as_confidence(payload, "confidence", self._unparsed_confidence),
            notes=as_text(payload, "notes"),
            model=model,
            generated_at=self._clock(),
            source="reasoning_service",
            calculation_steps=as_text_list(payload, "calculationSteps"),
            potential_issues=as_text_list(payload, "potentialIssues"),
        )

    def compare(self, record: FinancialRecord, reconstruction: Reconstruction) -> Comparison:
        difference = abs(record.official_nav - reconstruction.reconstructed_nav)
        difference_pct = self._difference_pct(difference, record.official_nav)
        reply = self._ask(
            "nav_comparison",
            comparison_prompt(record, reconstruction, difference, difference_pct),
        )
        if reply is None:
            return self._fallback_comparison(record, reconstruction, difference_pct)

        model = self._model()
        payload = parse_json_object(reply)
        if payload is None:
            logger.warning("Failed to parse comparison JSON response")
            return Comparison(
                severity="medium",
                explanation=reply,
                requires_investigation=True,
                model=model,
                generated_at=self._clock(),
                source="unparsed_response",
                anomalies=("Could not parse structured comparison",),
                recommendations=("Manual review required",),
            )

        return Comparison(
            severity=as_severity(payload, "severity", "medium"),
            explanation=as_text(payload, "explanation"),
            requires_investigation=as_bool(payload, "requiresInvestigation", True),
            model=model,
            generated_at=self._clock(),
            source="reasoning_service",
            anomalies=as_text_list(payload, "anomalies"),
            recommendations=as_text_list(payload, "recommendations"),
        )

    def explain(self, record: FinancialRecord) -> Explanation:
        reply = self._ask("nav_explanation", explanation_prompt(record))
        if reply is None:
            return Explanation(
                text=self._fallback_explanation(record),
                model=FALLBACK_MODEL,
                generated_at=self._clock(),
                source="fallback",
            )
        return Explanation(text=reply, model=self._model(), generated_at=self._clock(), source="reasoning_service")

    def _ask(self, operation: str, prompt: str) -> str | None:
        if self._reasoning is None:
            return None
        try:
            reply = self._reasoning.complete(prompt, system=self._system)
        except ReasoningServiceError as error:
            logger.error("%s failed (%s): %s", operation, error.code, error)
            log_llm_interaction(operation, {"prompt": prompt}, {"error": str(error), "code": error.code}, self._model())
            return None
        log_llm_interaction(operation, {"prompt": prompt}, {"response": reply}, self._model())
        return reply

    def _model(self) -> str:
        return self._reasoning.model if self._reasoning is not None else FALLBACK_MODEL

    @staticmethod
    def _difference_pct(difference: Decimal, official_nav: Decimal) -> Decimal | None:
        if official_nav <= 0:
            return None
        return difference / official_nav * 100

    def _fallback_comparison(
        self,
        record: FinancialRecord,
        reconstruction: Reconstruction,
        difference_pct: Decimal | None,
    ) -> Comparison:
        if difference_pct is None:
            anomalies: tuple[str, ...] = ("No official NAV stated in the document",)
        elif difference_pct > self._validator.tolerance_pct:
            anomalies = (
                f"Official NAV {per_unit(record.official_nav)} differs from reconstructed NAV "
                f"{per_unit(reconstruction.reconstructed_nav)} by {difference_pct:.4f}%",
            )
        else:
            anomalies = tuple()
        flagged = bool(anomalies)
        return Comparison(
            severity="medium" if flagged else "low",
            explanation=UNAVAILABLE_NOTE,
            requires_investigation=flagged,
            model=FALLBACK_MODEL,
            generated_at=self._clock(),
            source="fallback",
            anomalies=anomalies,
            recommendations=("Manual review required",) if flagged else tuple(),
        )

    @staticmethod
    def _fallback_explanation(record: FinancialRecord) -> str:
        fund = record.fund_name or "The fund"
        as_of = f" as of {record.date}" if record.date else ""
        return (
            f"{fund} reports total assets of {money(record.total_assets)} and total liabilities of "
            f"{money(record.total_liabilities)}{as_of}, leaving net assets of {money(record.net_assets)}. "
            f"Spread across {quantity(record.units_outstanding)} units outstanding, this gives a NAV per unit "
            f"of {per_unit(record.nav_per_unit)}, against an official NAV of {per_unit(record.official_nav)}. "
            f"{UNAVAILABLE_NOTE}"
        )

"""Application services orchestrating document intake."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from nav_sentinel.application.dto import DocumentAnalysis, new_document_id
from nav_sentinel.config import Settings
from nav_sentinel.domain.analysis.entities import FullAnalysis
from nav_sentinel.domain.repositories import DocumentSource
from nav_sentinel.domain.services import NavRecordValidator
from nav_sentinel.infrastructure.parsing.nav_text import extract

logger = logging.getLogger(__name__)


def validator_from_settings(settings: Settings) -> NavRecordValidator:
    return NavRecordValidator(
        tolerance_pct=settings.nav_tolerance_pct,
        error_penalty=settings.error_penalty,
        warning_penalty=settings.warning_penalty,
        decimal_context=settings.decimal_context,
    )


@dataclass(slots=True)
class IngestionContext:
    document: DocumentSource
    validator: NavRecordValidator
    min_monetary_values: int = 4


class IngestDocumentUseCase:
    def __init__(self, context: IngestionContext) -> None:
        self._context = context

    def execute(self, document_id: str | None = None) -> DocumentAnalysis:
        document = self._context.document
        raw_text = document.read_text()
        record = extract(raw_text, min_values=self._context.min_monetary_values)
        validation = self._context.validator.validate(record)

        result = DocumentAnalysis(
            document_id=document_id or new_document_id(),
            filename=document.name,
            record=record,
            validation=validation,
            received_at=datetime.now(timezone.utc),
        )
        logger.info(
            "Parsed %s (%s): fund=%r confidence=%d valid=%s",
            result.filename,
            result.document_id,
            record.fund_name,
            validation.confidence,
            validation.is_valid,
        )
        return result


def attach_analysis(result: DocumentAnalysis, analysis: FullAnalysis) -> DocumentAnalysis:
    return replace(result, analysis=analysis)

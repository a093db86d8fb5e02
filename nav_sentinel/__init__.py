"""NAV document extraction, validation and analysis toolkit."""
from nav_sentinel.application.analysis.use_cases import AnalyzeNavUseCase
from nav_sentinel.application.use_cases import IngestDocumentUseCase, IngestionContext
from nav_sentinel.domain.models import BreakdownItem, FinancialRecord
from nav_sentinel.domain.results import ValidationResult
from nav_sentinel.domain.services import NavRecordValidator, validate
from nav_sentinel.infrastructure.parsing.nav_text import extract
from nav_sentinel.infrastructure.repositories.document_repositories import (
    PdfDocumentSource,
    TextDocumentSource,
    open_document,
)

__all__ = [
    "extract",
    "validate",
    "BreakdownItem",
    "FinancialRecord",
    "ValidationResult",
    "NavRecordValidator",
    "IngestDocumentUseCase",
    "IngestionContext",
    "AnalyzeNavUseCase",
    "PdfDocumentSource",
    "TextDocumentSource",
    "open_document",
]

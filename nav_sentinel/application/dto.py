"""Application-level DTOs for document analysis."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from nav_sentinel.domain.analysis.entities import FullAnalysis
from nav_sentinel.domain.models import FinancialRecord
from nav_sentinel.domain.results import ValidationResult


def new_document_id() -> str:
    return f"nav-{uuid.uuid4().hex}"


@dataclass(slots=True, frozen=True)
class DocumentAnalysis:
    document_id: str
    filename: str
    record: FinancialRecord
    validation: ValidationResult
    received_at: datetime
    analysis: FullAnalysis | None = None

"""Archive application use cases."""
from __future__ import annotations

from dataclasses import dataclass

from nav_sentinel.application.dto import DocumentAnalysis
from nav_sentinel.domain.archive.entities import ArchiveFile, ArchiveReceipt, DocumentRun
from nav_sentinel.infrastructure.archive.file_repository import FileSystemArchiveRepository
from nav_sentinel.infrastructure.parsing.utils import compute_file_hash
from nav_sentinel.presentation.report import analysis_to_dict, render_csv, result_to_dict


@dataclass(slots=True)
class ArchiveDocumentUseCase:
    repository: FileSystemArchiveRepository

    def execute(self, result: DocumentAnalysis, document: ArchiveFile) -> ArchiveReceipt:
        outputs = [
            ArchiveFile.from_json("result.json", result_to_dict(result)),
            ArchiveFile(name="issues.csv", content=render_csv(result)),
        ]
        if result.analysis is not None:
            outputs.append(ArchiveFile.from_json("analysis.json", analysis_to_dict(result.analysis)))
        run = DocumentRun(
            document_id=result.document_id,
            document=document,
            outputs=tuple(outputs),
            metadata={
                "filename": result.filename,
                "fund_name": result.record.fund_name,
                "date": result.record.date,
                "is_valid": result.validation.is_valid,
                "confidence": result.validation.confidence,
                "received_at": result.received_at.isoformat(),
                "sha256": compute_file_hash(document.content),
            },
        )
        return self.repository.save_run(run)


@dataclass(slots=True)
class DeleteDocumentUseCase:
    repository: FileSystemArchiveRepository

    def execute(self, document_id: str) -> bool:
        return self.repository.delete_run(document_id)

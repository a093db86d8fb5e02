from pathlib import Path

import pytest

from nav_sentinel.application.use_cases import IngestDocumentUseCase, IngestionContext
from nav_sentinel.domain.services import NavRecordValidator
from nav_sentinel.infrastructure.parsing.pdf import DocumentReadError, is_pdf, pdf_to_text
from nav_sentinel.infrastructure.repositories.document_repositories import (
    PdfDocumentSource,
    TextDocumentSource,
    open_document,
)

SAMPLE = """FUND NAME: Test Investment Fund
DATE: 01/15/2024
TOTAL ASSETS: $1,250,000.00
TOTAL LIABILITIES: $50,000.00
UNITS OUTSTANDING: 10,000
OFFICIAL NAV: $120.00
"""


def test_text_source_reads_paths_and_strings(tmp_path: Path):
    path = tmp_path / "nav.txt"
    path.write_text(SAMPLE, encoding="utf-8")

    from_path = TextDocumentSource(path)
    from_string = TextDocumentSource(SAMPLE, name="pasted.txt")

    assert from_path.name == "nav.txt"
    assert from_path.read_text() == SAMPLE
    assert from_string.read_text() == SAMPLE
    assert from_string.read_bytes() == SAMPLE.encode("utf-8")


def test_open_document_detects_plain_text(tmp_path: Path):
    path = tmp_path / "nav.txt"
    path.write_bytes(SAMPLE.encode("utf-8"))

    document = open_document(path)

    assert isinstance(document, TextDocumentSource)
    assert document.name == "nav.txt"


def test_open_document_detects_pdf_header():
    document = open_document(b"%PDF-1.7\n...", name="nav.pdf")

    assert isinstance(document, PdfDocumentSource)
    assert is_pdf(b"  %PDF-1.4")
    assert not is_pdf(b"hello")


def test_upload_limit_is_enforced():
    with pytest.raises(DocumentReadError):
        TextDocumentSource(b"x" * 11, max_bytes=10)


def test_non_pdf_bytes_are_rejected():
    with pytest.raises(DocumentReadError, match="Only PDF files are allowed"):
        pdf_to_text(b"plain text pretending")


def test_corrupt_pdf_raises_read_error():
    with pytest.raises(DocumentReadError):
        PdfDocumentSource(b"%PDF-1.4\nthis is not really a pdf").read_text()


def test_ingestion_pipeline_extracts_and_validates():
    context = IngestionContext(document=TextDocumentSource(SAMPLE, name="sample.txt"), validator=NavRecordValidator())

    result = IngestDocumentUseCase(context).execute(document_id="nav-test")

    assert result.document_id == "nav-test"
    assert result.filename == "sample.txt"
    assert result.record.fund_name == "Test Investment Fund"
    assert result.record.date == "01/15/2024"
    assert result.validation.errors == ()
    assert result.analysis is None


def test_ingestion_generates_document_ids():
    context = IngestionContext(document=TextDocumentSource("nothing"), validator=NavRecordValidator())

    first = IngestDocumentUseCase(context).execute()
    second = IngestDocumentUseCase(context).execute()

    assert first.document_id.startswith("nav-")
    assert first.document_id != second.document_id
    assert not first.validation.is_valid

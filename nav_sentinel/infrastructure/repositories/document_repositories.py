"""Document sources feeding raw text into the extraction pipeline."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path

from nav_sentinel.domain.repositories import DocumentSource
from nav_sentinel.infrastructure.parsing.pdf import DocumentReadError, is_pdf, pdf_to_text
from nav_sentinel.infrastructure.parsing.utils import decode_text, ensure_bytes


def _check_size(data: bytes, max_bytes: int | None) -> bytes:
    if max_bytes is not None and len(data) > max_bytes:
        raise DocumentReadError(f"Document exceeds the {max_bytes} byte upload limit")
    return data


class PdfDocumentSource(DocumentSource):
    def __init__(self, source: BytesIO | Path | bytes, name: str = "document.pdf", max_bytes: int | None = None) -> None:
        self._source = _check_size(ensure_bytes(source), max_bytes)
        self.name = source.name if isinstance(source, Path) else name

    def read_bytes(self) -> bytes:
        return self._source

    def read_text(self) -> str:
        return pdf_to_text(self._source)


class TextDocumentSource(DocumentSource):
    def __init__(self, source: BytesIO | Path | bytes | str, name: str = "document.txt", max_bytes: int | None = None) -> None:
        if isinstance(source, str):
            source = source.encode("utf-8")
        self._source = _check_size(ensure_bytes(source), max_bytes)
        self.name = source.name if isinstance(source, Path) else name

    def read_bytes(self) -> bytes:
        return self._source

    def read_text(self) -> str:
        return decode_text(self._source)


def open_document(source: BytesIO | Path | bytes, name: str | None = None, max_bytes: int | None = None) -> DocumentSource:
    """Pick the PDF or plain-text source by content."""
    data = ensure_bytes(source)
    if name is None:
        name = source.name if isinstance(source, Path) else "document"
    if is_pdf(data):
        return PdfDocumentSource(data, name=name, max_bytes=max_bytes)
    return TextDocumentSource(data, name=name, max_bytes=max_bytes)

"""PDF to text conversion for uploaded NAV documents."""
from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

import pdfplumber
from pdfminer.pdfparser import PDFSyntaxError
from pdfplumber.utils.exceptions import PdfminerException

from nav_sentinel.infrastructure.parsing.utils import ensure_bytes

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"


class DocumentReadError(Exception):
    """Raised when an uploaded document cannot be turned into text."""


def is_pdf(data: bytes) -> bool:
    return data.lstrip()[:4] == PDF_MAGIC


def pdf_to_text(source: BytesIO | Path | bytes, max_pages: int | None = None) -> str:
    data = ensure_bytes(source)
    if not is_pdf(data):
        raise DocumentReadError("Only PDF files are allowed")

    pages: list[str] = []
    try:
        with pdfplumber.open(BytesIO(data)) as pdf:
            selected = pdf.pages if max_pages is None else pdf.pages[:max_pages]
            for page in selected:
                pages.append(page.extract_text() or "")
    except (PDFSyntaxError, PdfminerException) as exc:
        raise DocumentReadError(f"Failed to parse PDF: {exc}") from exc

    text = "\n".join(pages)
    logger.info("Extracted %d characters from %d PDF page(s)", len(text), len(pages))
    return text

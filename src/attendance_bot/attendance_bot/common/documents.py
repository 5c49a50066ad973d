from __future__ import annotations

import logging
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def extract_pdf_text(path: str | Path) -> str:
    """Text layer of every page, pages separated by blank lines.

    Scanned PDFs have no text layer; they are rejected so the student can send a photo instead.
    """
    try:
        reader = PdfReader(str(path))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PyPdfError, OSError, ValueError) as e:
        raise ValidationError(f"Could not read PDF: {e}") from e

    text = "\n\n".join(p.strip() for p in pages if p.strip())
    if not text:
        raise ValidationError("The PDF has no readable text")
    logger.info("Extracted %d characters from %d PDF pages", len(text), len(pages))
    return text

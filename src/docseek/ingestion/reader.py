"""Document text extraction.

PDFs are read with PyMuPDF (fitz); anything else is treated as UTF-8 text.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import fitz  # PyMuPDF

from docseek.exceptions import DocumentReadError
from docseek.utils.text import normalize_whitespace

LOGGER = logging.getLogger(__name__)


def iter_text_parts(path: Path) -> Iterator[str]:
    """Yield text content from a PDF file page by page."""
    try:
        doc = fitz.open(path)
    except Exception as exc:
        LOGGER.error("Failed to open PDF %s: %s", path, exc)
        raise DocumentReadError(f"Couldn't read the document {path}: {exc}", filepath=path) from exc

    try:
        for index in range(len(doc)):
            try:
                text = doc[index].get_text() or ""
            except Exception as exc:
                LOGGER.warning("Failed to read page %s in %s: %s", index, path, exc)
                continue
            normalized = normalize_whitespace([text])
            if normalized:
                yield normalized + "\n"
    finally:
        doc.close()


def read_pdf(path: Path) -> str:
    return "".join(iter_text_parts(path))


def read_plain_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        LOGGER.error("Failed to read %s: %s", path, exc)
        raise DocumentReadError(f"Couldn't read the document {path}: {exc}", filepath=path) from exc


def read_document(path: Path) -> str:
    """Return the full extracted text of ``path``.

    An empty string is a valid result for documents without text.
    """
    path = Path(path)
    if path.suffix.lower() == ".pdf":
        return read_pdf(path)
    return read_plain_text(path)

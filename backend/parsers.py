# parsers.py
from __future__ import annotations
import io
import logging
from typing import List

from pypdf import PdfReader

from errors import UnreadableDocument

LOG = logging.getLogger("parsers")

PDF_MAGIC = b"%PDF"


def looks_like_pdf(file_bytes: bytes) -> bool:
    """True if the bytes carry the PDF header within the first KB.

    Some generators prepend a few junk bytes before ``%PDF``; readers accept that.
    """
    return PDF_MAGIC in (file_bytes or b"")[:1024]


def _page_texts(reader: PdfReader) -> List[str]:
    chunks: List[str] = []
    for idx, page in enumerate(reader.pages):
        try:
            t = page.extract_text() or ""
        except Exception as e:  # one broken page shouldn't sink the whole resume
            LOG.warning("page %d text extraction failed: %s", idx, e)
            t = ""
        if t:
            chunks.append(t)
    return chunks


def extract_text(file_bytes: bytes) -> str:
    """Extract visible text from a PDF using pypdf.

    This ignores images (no OCR), but grabs all text from all pages.
    Raises UnreadableDocument when the bytes are not a readable PDF or no
    usable text comes out of it.
    """
    if not file_bytes:
        raise UnreadableDocument("The uploaded file is empty.")
    if not looks_like_pdf(file_bytes):
        raise UnreadableDocument("The uploaded file is not a PDF document.")

    try:
        reader = PdfReader(io.BytesIO(file_bytes))
        if reader.is_encrypted:
            # empty owner password is common for "protected" resumes
            reader.decrypt("")
        text = "\n".join(_page_texts(reader))
    except Exception as e:
        LOG.error("PdfReader failed: %s", e)
        raise UnreadableDocument(
            f"Failed to read text from PDF: {e}. Please ensure it's a valid and readable PDF file."
        ) from e

    LOG.info("PDF text length: %d chars", len(text))
    if not text.strip():
        raise UnreadableDocument()
    return text

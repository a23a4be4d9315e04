"""Tests for PDF text extraction."""

from __future__ import annotations

import pytest

from errors import UnreadableDocument
from parsers import extract_text, looks_like_pdf


def test_extract_text_reads_all_lines(resume_pdf: bytes) -> None:
    text = extract_text(resume_pdf)
    assert "Jane Doe" in text
    assert "jane@example.com" in text
    assert "Tableau" in text


def test_blank_pdf_is_unreadable(blank_pdf: bytes) -> None:
    with pytest.raises(UnreadableDocument) as exc:
        extract_text(blank_pdf)
    assert "Could not extract text" in exc.value.detail


def test_non_pdf_bytes_are_unreadable() -> None:
    with pytest.raises(UnreadableDocument):
        extract_text(b"Jane Doe\nPython, SQL\n")


def test_empty_bytes_are_unreadable() -> None:
    with pytest.raises(UnreadableDocument):
        extract_text(b"")


def test_garbage_after_pdf_header_is_unreadable() -> None:
    with pytest.raises(UnreadableDocument) as exc:
        extract_text(b"%PDF-1.4\nthis is not really a pdf body")
    assert exc.value.status_code == 400


def test_looks_like_pdf() -> None:
    assert looks_like_pdf(b"%PDF-1.7\n...")
    assert looks_like_pdf(b"\x00\x00%PDF-1.4")
    assert not looks_like_pdf(b"PK\x03\x04 docx zip")
    assert not looks_like_pdf(b"")

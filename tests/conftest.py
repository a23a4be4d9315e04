"""Shared fixtures: a fake completion adapter, app/client and PDF builders."""

from __future__ import annotations

import io
import json
from typing import List, Optional

import pytest
from pypdf import PdfWriter

from app import create_app
from config import TestingConfig


VALID_RESULT = {
    "extracted_fields": {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "phone": None,
        "skills": ["Python", "SQL"],
        "work_experience": [
            {"company": "Acme", "role": "Data Analyst", "dates": "2020 - Present", "description": "Built dashboards."}
        ],
    },
    "questionnaire_prompt": "Strong analytics background.\n\n* Quantify impact.\n\n1. What was the data volume?",
}


class FakeCompleter:
    """Stands in for CompletionClient; records every prompt it receives."""

    def __init__(self, reply: str = "", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


def _pdf_escape(s: str) -> str:
    return s.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_text_pdf(lines: List[str]) -> bytes:
    """Write a one-page PDF whose content stream draws ``lines`` in Helvetica."""
    content = "".join(
        f"BT /F1 12 Tf 72 {720 - 16 * i} Td ({_pdf_escape(line)}) Tj ET\n"
        for i, line in enumerate(lines)
    ).encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length " + str(len(content)).encode() + b" >>\nstream\n" + content + b"endstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = io.BytesIO()
    out.write(b"%PDF-1.4\n")
    offsets = []
    for num, body in enumerate(objects, start=1):
        offsets.append(out.tell())
        out.write(f"{num} 0 obj\n".encode() + body + b"\nendobj\n")
    xref_at = out.tell()
    out.write(f"xref\n0 {len(objects) + 1}\n".encode())
    out.write(b"0000000000 65535 f \n")
    for off in offsets:
        out.write(f"{off:010d} 00000 n \n".encode())
    out.write(f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_at}\n%%EOF\n".encode())
    return out.getvalue()


def build_blank_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


@pytest.fixture
def resume_pdf() -> bytes:
    return build_text_pdf([
        "Jane Doe",
        "jane@example.com",
        "Skills: Python, SQL, Tableau",
        "Data Analyst at Acme (2020 - Present)",
    ])


@pytest.fixture
def blank_pdf() -> bytes:
    return build_blank_pdf()


@pytest.fixture
def completer() -> FakeCompleter:
    return FakeCompleter(reply=json.dumps(VALID_RESULT))


@pytest.fixture
def app(completer: FakeCompleter):
    return create_app(TestingConfig, completer=completer)


@pytest.fixture
def client(app):
    return app.test_client()

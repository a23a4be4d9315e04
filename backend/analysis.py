# analysis.py
from __future__ import annotations
import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Protocol

from errors import InvalidRequest, UnreadableDocument
from parsers import extract_text, looks_like_pdf
from prompts import build_prompt
from recovery import recover

LOG = logging.getLogger("analysis")

MAX_YEARS = 50
DEFAULT_MAX_RESUME_BYTES = 10 * 1024 * 1024
# plain decimal, optional sign and exponent; no "inf", "nan" or "1_0"
YEARS_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


class Completer(Protocol):
    def complete(self, prompt: str) -> str: ...


@dataclass(frozen=True)
class AnalysisRequest:
    document_bytes: bytes
    target_role: str
    years_of_experience: str
    target_company: Optional[str] = None
    filename: Optional[str] = None


def _text(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    return str(value).strip()


def _decode_base64(data: str) -> bytes:
    # browsers hand over a data URL; accept both that and a bare payload
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    data = "".join(data.split())
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidRequest("resumeBase64 is not valid base64 data.") from e


def validate_request(req: AnalysisRequest, max_bytes: int = DEFAULT_MAX_RESUME_BYTES) -> AnalysisRequest:
    """Server-side mirror of the upload form's rules."""
    if not req.target_role:
        raise InvalidRequest("Target Role is required.")
    if not YEARS_RE.fullmatch(req.years_of_experience.strip()):
        raise InvalidRequest("Years of Experience must be a number.")
    years = float(req.years_of_experience)
    if years < 0:
        raise InvalidRequest("Years of Experience cannot be negative.")
    if years > MAX_YEARS:
        raise InvalidRequest("Years of Experience seems too high.")
    if not req.document_bytes:
        raise InvalidRequest("Resume file is required.")
    if len(req.document_bytes) > max_bytes:
        raise InvalidRequest(f"Resume must be less than {max_bytes // (1024 * 1024)}MB.")
    if not looks_like_pdf(req.document_bytes):
        raise InvalidRequest("Only PDF files are allowed.")
    return req


def request_from_json(payload: Any) -> AnalysisRequest:
    """Build a request from the JSON body variant (base64-encoded PDF)."""
    if not isinstance(payload, Mapping):
        raise InvalidRequest("Request body must be a JSON object.")
    resume_b64 = payload.get("resumeBase64")
    role = _text(payload.get("Target_Role"))
    years = _text(payload.get("Years_of_Experience"))
    if not isinstance(resume_b64, str) or not resume_b64.strip() or not role or not years:
        raise InvalidRequest()
    return AnalysisRequest(
        document_bytes=_decode_base64(resume_b64.strip()),
        target_role=role,
        years_of_experience=years,
        target_company=_text(payload.get("Target_Company")) or None,
        filename=_text(payload.get("filename")) or None,
    )


def request_from_form(form: Mapping[str, Any], files: Mapping[str, Any]) -> AnalysisRequest:
    """Build a request from the multipart variant (file field ``resume``)."""
    upload = files.get("resume") or files.get("file")
    role = _text(form.get("Target_Role"))
    years = _text(form.get("Years_of_Experience"))
    if upload is None or not upload.filename or not role or not years:
        raise InvalidRequest("Missing required form fields: resume, Target_Role, Years_of_Experience.")

    mime = (upload.mimetype or "").lower()
    if not upload.filename.lower().endswith(".pdf") and "pdf" not in mime:
        raise InvalidRequest("Only PDF files are allowed.")

    return AnalysisRequest(
        document_bytes=upload.read(),
        target_role=role,
        years_of_experience=years,
        target_company=_text(form.get("Target_Company")) or None,
        filename=upload.filename,
    )


def analyze(
    req: AnalysisRequest,
    completer: Completer,
    extractor: Callable[[bytes], str] = extract_text,
    max_bytes: int = DEFAULT_MAX_RESUME_BYTES,
) -> Dict[str, Any]:
    """validate -> extract -> prompt -> complete -> recover. Fails fast on any step."""
    validate_request(req, max_bytes=max_bytes)
    LOG.info(
        "analysis started role=%r company=%r years=%s pdf_bytes=%d",
        req.target_role, req.target_company, req.years_of_experience, len(req.document_bytes),
    )

    resume_text = extractor(req.document_bytes)
    if not (resume_text or "").strip():
        raise UnreadableDocument()
    LOG.info("extracted resume text length=%d", len(resume_text))

    prompt = build_prompt(req, resume_text)
    raw = completer.complete(prompt)
    result = recover(raw)
    LOG.info("analysis finished, extracted_fields keys=%s", _field_names(result))
    return result


def _field_names(result: Dict[str, Any]) -> list:
    fields = result.get("extracted_fields")
    return list(fields.keys()) if isinstance(fields, dict) else []

# errors.py
from __future__ import annotations


class AnalysisError(Exception):
    """Base for every failure the analysis endpoint reports to the client.

    Each subclass carries the HTTP status it maps to; ``detail`` is the
    human-readable message sent back as ``{"detail": ...}``.
    """
    status_code = 500
    default_detail = "Resume analysis failed."

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidRequest(AnalysisError):
    status_code = 400
    default_detail = "Missing required form fields: resumeBase64, Target_Role, Years_of_Experience."


class UnreadableDocument(AnalysisError):
    status_code = 400
    default_detail = (
        "Could not extract text from the uploaded PDF. "
        "It might be empty, image-based, or corrupted."
    )


class UpstreamUnavailable(AnalysisError):
    status_code = 500
    default_detail = "The analysis service is unavailable right now. Please try again later."


class MalformedCompletion(AnalysisError):
    status_code = 500
    default_detail = "Failed to parse AI response into expected format. Please try again later."


class UnexpectedShape(AnalysisError):
    status_code = 500
    default_detail = "AI response was missing required sections. Please try again later."

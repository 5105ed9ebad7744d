"""Error taxonomy for the AI analysis pipeline.

Each error carries the HTTP status the API should answer with. Everything
except ``ProfileFetchError`` is fatal to the current analysis.
"""
from __future__ import annotations


class PracticeAnalysisError(Exception):
    """Base class for analysis failures surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(PracticeAnalysisError):
    """The AI service credential is missing."""

    status_code = 500


class AnalysisValidationError(PracticeAnalysisError):
    """The analysis request is malformed (e.g. no categories requested)."""

    status_code = 400


class NoDataError(PracticeAnalysisError):
    """There are no practice sessions to analyse."""

    status_code = 400


class UpstreamEmptyResponseError(PracticeAnalysisError):
    """The completion service returned no text for a step."""

    status_code = 500

    def __init__(self, step: int | None = None) -> None:
        label = f"step {step}" if step is not None else "request"
        super().__init__(f"No response from the AI service for {label}")
        self.step = step


class UpstreamServiceError(PracticeAnalysisError):
    """The completion service rejected or failed the request."""

    status_code = 500

    def __init__(self, detail: str, step: int | None = None) -> None:
        super().__init__(f"AI service request failed: {detail}")
        self.step = step
        self.detail = detail


class JSONExtractionError(PracticeAnalysisError, ValueError):
    """Model output could not be turned into valid JSON."""

    status_code = 500


class AnalysisStepError(PracticeAnalysisError):
    """A pipeline step failed; wraps the underlying cause."""

    status_code = 500

    def __init__(self, step: int, detail: str) -> None:
        super().__init__(f"Step {step} failed: {detail}")
        self.step = step
        self.detail = detail


class ProfileFetchError(PracticeAnalysisError):
    """Profile lookup failed. Analysis continues without personalisation."""

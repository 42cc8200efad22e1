"""Exception hierarchy raised by the case lookup pipeline.

Every error carries a stable :class:`ErrorCode` plus a short, human-readable
``summary`` that is safe to return to API callers. ``detail`` holds the
diagnostic text (selector, status, underlying Playwright message).
"""
from __future__ import annotations

from typing import Optional

from .error_codes import ErrorCode


class PipelineError(Exception):
    error_code: str = ErrorCode.INTERNAL
    summary: str = "An error occurred while fetching case details"

    def __init__(self, message: str | None = None, *, detail: Optional[str] = None) -> None:
        super().__init__(message or self.summary)
        self.detail = detail


class ValidationError(PipelineError):
    error_code = ErrorCode.VALIDATION
    summary = "Missing required fields"

    def __init__(self, missing: list[str]) -> None:
        super().__init__(self.summary, detail=", ".join(missing))
        self.missing = list(missing)


class NavigationError(PipelineError):
    error_code = ErrorCode.NAVIGATION
    summary = "Failed to load the case status page"


class ElementNotFoundError(PipelineError):
    error_code = ErrorCode.ELEMENT_NOT_FOUND
    summary = "Expected page element did not appear"

    def __init__(self, selector: str, *, detail: Optional[str] = None) -> None:
        super().__init__(f"Element {selector!r} did not appear", detail=detail)
        self.selector = selector


class ExtractionTimeoutError(ElementNotFoundError):
    error_code = ErrorCode.EXTRACTION_TIMEOUT
    summary = "Case details did not appear after submission"


class FormStateError(PipelineError):
    error_code = ErrorCode.FORM_STATE
    summary = "Search form was not in the expected state"


class FormStepTimeoutError(PipelineError):
    error_code = ErrorCode.FORM_STEP_TIMEOUT
    summary = "Timed out while filling the search form"

    def __init__(self, step_name: str, *, detail: Optional[str] = None) -> None:
        super().__init__(f"Form step {step_name!r} timed out", detail=detail)
        self.step_name = step_name


class CaptchaNotFoundError(PipelineError):
    error_code = ErrorCode.CAPTCHA_NOT_FOUND
    summary = "CAPTCHA image not found"


class CaptchaUnsolvedError(PipelineError):
    error_code = ErrorCode.CAPTCHA_UNSOLVED
    summary = "Failed to solve CAPTCHA correctly."

    def __init__(self, attempts: int, *, detail: Optional[str] = None) -> None:
        super().__init__(f"CAPTCHA not solved after {attempts} attempts", detail=detail)
        self.attempts = attempts


class OcrError(PipelineError):
    error_code = ErrorCode.OCR
    summary = "OCR engine failed"


class SubmissionTimeoutError(PipelineError):
    error_code = ErrorCode.SUBMISSION_TIMEOUT
    summary = "Timed out waiting for the search response"


class SubmissionRejectedError(PipelineError):
    error_code = ErrorCode.SUBMISSION_REJECTED
    summary = "Form submission was rejected"

    def __init__(self, status: int, *, detail: Optional[str] = None) -> None:
        super().__init__(f"Form submission failed with status: {status}", detail=detail)
        self.status = status


__all__ = [
    "PipelineError",
    "ValidationError",
    "NavigationError",
    "ElementNotFoundError",
    "ExtractionTimeoutError",
    "FormStateError",
    "FormStepTimeoutError",
    "CaptchaNotFoundError",
    "CaptchaUnsolvedError",
    "OcrError",
    "SubmissionTimeoutError",
    "SubmissionRejectedError",
]

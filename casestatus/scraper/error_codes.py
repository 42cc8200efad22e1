from __future__ import annotations

"""Centralised error code taxonomy for case lookup failures.

These codes are returned to API callers as ``error_code`` and included in
structured logs so that a failed lookup can be traced to the stage that
aborted it. Keep them stable; clients may branch on them.
"""


class ErrorCode:
    VALIDATION = "validation_error"
    NAVIGATION = "navigation_error"
    ELEMENT_NOT_FOUND = "element_not_found"
    FORM_STATE = "form_state_error"
    FORM_STEP_TIMEOUT = "form_step_timeout"
    CAPTCHA_NOT_FOUND = "captcha_not_found"
    CAPTCHA_UNSOLVED = "captcha_unsolved"
    OCR = "ocr_error"
    SUBMISSION_TIMEOUT = "submission_timeout"
    SUBMISSION_REJECTED = "submission_rejected"
    EXTRACTION_TIMEOUT = "extraction_timeout"
    INTERNAL = "internal_error"


__all__ = ["ErrorCode"]

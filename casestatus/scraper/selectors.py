from __future__ import annotations

"""Selectors for the district court case-status search form."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CaseStatusSelectors:
    """DOM hooks for the "search by case number" page.

    The case type, number and year inputs are only rendered after the
    "court complex" radio is toggled, and the case type dropdown is served
    with a ``disabled`` attribute that the site's own script removes once the
    complex request finishes.
    """

    complex_mode_radio: str = "#chkYes"
    court_complex_select: str = "#est_code"
    case_type_select: str = "#case_type"
    case_number_input: str = "#reg_no"
    case_year_input: str = "#reg_year"

    captcha_image: str = "#siwp_captcha_image_0"
    captcha_refresh: str = ".captcha-refresh-btn"
    captcha_input: str = "#siwp_captcha_value_0"
    submit_button: str = 'input[name="submit"]'

    case_title: str = ".case-title"
    case_status: str = ".case-status"
    hearing_date: str = ".hearing-date"
    order_judgment: str = ".order-judgment"


CASE_STATUS_SELECTORS = CaseStatusSelectors()

__all__ = [
    "CaseStatusSelectors",
    "CASE_STATUS_SELECTORS",
]

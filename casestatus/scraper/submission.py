"""Submit the completed search form and read the case details."""
from __future__ import annotations

from typing import Any, Mapping

from playwright.sync_api import Page, Response, TimeoutError as PWTimeout

from . import config
from .browser_session import BrowserSession, seconds_to_ms
from .config import PipelineConfig
from .errors import (
    ElementNotFoundError,
    ExtractionTimeoutError,
    FormStepTimeoutError,
    SubmissionRejectedError,
    SubmissionTimeoutError,
)
from .logging_utils import _scraper_event, step_events
from .models import NOT_AVAILABLE, CaseResult
from .selectors import CASE_STATUS_SELECTORS, CaseStatusSelectors
from .utils import log_line

# Reads innerText for each selector in one round trip; absent elements map to null.
_EXTRACT_SCRIPT = """
(selectors) => {
    const out = {};
    for (const [key, selector] of Object.entries(selectors)) {
        const el = document.querySelector(selector);
        out[key] = el ? el.innerText : null;
    }
    return out;
}
"""


def _text_or_default(value: Any) -> str:
    if value is None:
        return NOT_AVAILABLE
    text = str(value).strip()
    return text or NOT_AVAILABLE


class SubmissionAndExtractor:
    def __init__(
        self,
        session: BrowserSession,
        pipeline_config: PipelineConfig,
        selectors: CaseStatusSelectors = CASE_STATUS_SELECTORS,
        *,
        response_url_fragment: str | None = None,
    ) -> None:
        self.session = session
        self.config = pipeline_config
        self.selectors = selectors
        self.response_url_fragment = response_url_fragment or config.RESPONSE_URL_FRAGMENT

    @property
    def page(self) -> Page:
        return self.session.require_page()

    def _is_search_response(self, response: Response) -> bool:
        return self.response_url_fragment in response.url

    def submit(self, captcha_text: str) -> int:
        """Enter the CAPTCHA answer, click submit and wait for the search response.

        Returns the HTTP status of the matched response.
        """

        with step_events("submit", "enter_captcha"):
            self.session.wait_for_element(
                self.selectors.captcha_input, self.config.short_step_timeout
            )
            try:
                self.page.fill(
                    self.selectors.captcha_input,
                    captcha_text,
                    timeout=seconds_to_ms(self.config.short_step_timeout),
                )
            except PWTimeout as exc:
                raise FormStepTimeoutError("enter_captcha", detail=str(exc)) from exc

        timeout_ms = seconds_to_ms(self.config.submission_timeout)
        with step_events("submit", "submit_form"):
            try:
                with self.page.expect_response(
                    self._is_search_response, timeout=timeout_ms
                ) as response_info:
                    self.page.click(self.selectors.submit_button, timeout=timeout_ms)
                response = response_info.value
            except PWTimeout as exc:
                raise SubmissionTimeoutError(
                    f"No search response within {self.config.submission_timeout}s",
                    detail=str(exc),
                ) from exc

            _scraper_event("submit", step="response", url=response.url, status=response.status)
            if not response.ok:
                raise SubmissionRejectedError(response.status, detail=response.url)

        log_line("Form submitted successfully")
        return response.status

    def extract(self) -> CaseResult:
        """Wait for the case title, then read every result field."""

        with step_events("extract", "read_case_details"):
            try:
                self.session.wait_for_element(
                    self.selectors.case_title, self.config.result_timeout
                )
            except ElementNotFoundError as exc:
                raise ExtractionTimeoutError(
                    self.selectors.case_title, detail=exc.detail or str(exc)
                ) from exc

            raw: Mapping[str, Any] = self.page.evaluate(
                _EXTRACT_SCRIPT,
                {
                    "case_title": self.selectors.case_title,
                    "case_status": self.selectors.case_status,
                    "hearing_date": self.selectors.hearing_date,
                    "order_judgment": self.selectors.order_judgment,
                },
            ) or {}

        result = CaseResult(
            case_title=_text_or_default(raw.get("case_title")),
            case_status=_text_or_default(raw.get("case_status")),
            hearing_date=_text_or_default(raw.get("hearing_date")),
            order_judgment=_text_or_default(raw.get("order_judgment")),
        )
        _scraper_event("extract", step="case_details", **result.to_dict())
        return result


__all__ = ["SubmissionAndExtractor"]

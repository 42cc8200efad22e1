"""Bring the case-status search form into a submit-ready state."""
from __future__ import annotations

from playwright.sync_api import Error as PWError, Page, TimeoutError as PWTimeout

from .browser_session import BrowserSession, seconds_to_ms
from .config import PipelineConfig
from .errors import ElementNotFoundError, FormStateError, FormStepTimeoutError
from .logging_utils import step_events
from .models import CaseQuery
from .selectors import CASE_STATUS_SELECTORS, CaseStatusSelectors
from .utils import log_line

_CLICK_SCRIPT = "(selector) => document.querySelector(selector).click()"
_ENABLE_SCRIPT = "(selector) => document.querySelector(selector).removeAttribute('disabled')"


class FormDriver:
    """Drive the search form one strictly ordered step at a time.

    Each step waits for its target element before acting. A wait timeout
    aborts with :class:`FormStepTimeoutError`; a control in the wrong state
    (unchecked radio, disabled dropdown, unknown option) aborts with
    :class:`FormStateError`.
    """

    def __init__(
        self,
        session: BrowserSession,
        pipeline_config: PipelineConfig,
        selectors: CaseStatusSelectors = CASE_STATUS_SELECTORS,
    ) -> None:
        self.session = session
        self.config = pipeline_config
        self.selectors = selectors

    @property
    def page(self) -> Page:
        return self.session.require_page()

    def fill(self, query: CaseQuery) -> None:
        self.select_complex_mode()
        self.select_court_complex(query.court_complex)
        self.select_case_type(query.case_type)
        self.enter_case_number(query.case_number)
        self.enter_case_year(query.case_year)

    # ------------------------------------------------------------------
    # steps
    # ------------------------------------------------------------------

    def select_complex_mode(self) -> None:
        step = "select_complex_mode"
        selector = self.selectors.complex_mode_radio
        with step_events("form", step):
            self._await_step(step, selector, self.config.step_timeout)
            self.page.evaluate(_CLICK_SCRIPT, selector)
            # The case type/number fields are only rendered once this is checked.
            if not self.page.is_checked(selector):
                raise FormStateError(
                    "Court complex search mode did not activate", detail=selector
                )

    def select_court_complex(self, court_complex: str) -> None:
        step = "select_court_complex"
        selector = self.selectors.court_complex_select
        with step_events("form", step, value=court_complex):
            self._await_step(step, selector, self.config.step_timeout)
            self._select(step, selector, court_complex, self.config.step_timeout)

    def select_case_type(self, case_type: str) -> None:
        step = "select_case_type"
        selector = self.selectors.case_type_select
        with step_events("form", step, value=case_type):
            self._await_step(step, selector, self.config.short_step_timeout)
            self._ensure_enabled(step, selector)
            self._select(step, selector, case_type, self.config.short_step_timeout)

    def enter_case_number(self, case_number: str) -> None:
        self._enter_text("enter_case_number", self.selectors.case_number_input, case_number)

    def enter_case_year(self, case_year: str) -> None:
        self._enter_text("enter_case_year", self.selectors.case_year_input, case_year)

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _await_step(self, step: str, selector: str, timeout: float) -> None:
        try:
            self.session.wait_for_element(selector, timeout)
        except ElementNotFoundError as exc:
            raise FormStepTimeoutError(step, detail=exc.detail or str(exc)) from exc

    def _ensure_enabled(self, step: str, selector: str) -> None:
        if not self.page.is_disabled(selector):
            return
        log_line(f"{selector} is disabled; enabling before {step}")
        self.page.evaluate(_ENABLE_SCRIPT, selector)
        if self.page.is_disabled(selector):
            raise FormStateError(f"{selector} is still disabled", detail=step)

    def _select(self, step: str, selector: str, value: str, timeout: float) -> None:
        if self.page.is_disabled(selector):
            raise FormStateError(f"Refusing to select into disabled {selector}", detail=step)
        try:
            selected = self.page.select_option(selector, value, timeout=seconds_to_ms(timeout))
        except PWTimeout as exc:
            # Dependent options are loaded asynchronously after the previous step.
            raise FormStepTimeoutError(step, detail=str(exc)) from exc
        except PWError as exc:
            raise FormStateError(
                f"Could not select {value!r} in {selector}", detail=str(exc)
            ) from exc
        if value not in (selected or []):
            raise FormStateError(
                f"Option {value!r} not available in {selector}", detail=step
            )

    def _enter_text(self, step: str, selector: str, value: str) -> None:
        with step_events("form", step, value=value):
            self._await_step(step, selector, self.config.short_step_timeout)
            try:
                self.page.fill(
                    selector, value, timeout=seconds_to_ms(self.config.short_step_timeout)
                )
            except PWTimeout as exc:
                # fill also waits for the field to become editable.
                raise FormStepTimeoutError(step, detail=str(exc)) from exc


__all__ = ["FormDriver"]

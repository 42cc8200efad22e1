"""Read the text CAPTCHA with OCR, refreshing it when the read looks wrong."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from playwright.sync_api import Error as PWError, Page

from .browser_session import BrowserSession, seconds_to_ms
from .config import PipelineConfig
from .errors import CaptchaNotFoundError, CaptchaUnsolvedError, ElementNotFoundError
from .logging_utils import _scraper_event
from .models import CaptchaAttempt
from .ocr import OcrEngine
from .retry_policy import decide_captcha_retry, is_plausible_captcha, normalize_captcha_text
from .selectors import CASE_STATUS_SELECTORS, CaseStatusSelectors
from .utils import log_line


class CaptchaResolver:
    """Bounded OCR loop over the form's CAPTCHA image.

    Each pass screenshots the image to the session's transient CAPTCHA file,
    runs OCR and applies the acceptance rule. A rejected read triggers a
    refresh, a settle delay and a fresh capture. OCR runs at most
    ``captcha_max_attempts`` times.
    """

    def __init__(
        self,
        session: BrowserSession,
        ocr: OcrEngine,
        pipeline_config: PipelineConfig,
        selectors: CaseStatusSelectors = CASE_STATUS_SELECTORS,
        *,
        min_length: Optional[int] = None,
    ) -> None:
        self.session = session
        self.ocr = ocr
        self.config = pipeline_config
        self.selectors = selectors
        self.min_length = min_length
        self.attempts: list[CaptchaAttempt] = []

    @property
    def page(self) -> Page:
        return self.session.require_page()

    def resolve(self) -> str:
        try:
            self.session.wait_for_element(self.selectors.captcha_image, self.config.step_timeout)
        except ElementNotFoundError as exc:
            raise CaptchaNotFoundError(detail=exc.detail or str(exc)) from exc

        image_path = self._capture()
        max_attempts = max(1, self.config.captcha_max_attempts)

        for attempt_index in range(1, max_attempts + 1):
            text = normalize_captcha_text(self.ocr.recognize(image_path))
            attempt = CaptchaAttempt(
                attempt_index=attempt_index,
                image_path=image_path,
                recognized_text=text,
                accepted=is_plausible_captcha(text, self.min_length),
            )
            self.attempts.append(attempt)
            _scraper_event(
                "captcha",
                step="ocr_attempt",
                attempt=attempt_index,
                text=text,
                accepted=attempt.accepted,
            )

            if attempt.accepted:
                log_line(f"CAPTCHA accepted on attempt {attempt_index}")
                return text

            if not decide_captcha_retry(
                attempt_index, max_attempts, text, min_length=self.min_length
            ):
                break

            log_line("OCR read too short; refreshing CAPTCHA")
            self._refresh()
            image_path = self._capture()

        reads = ", ".join(repr(a.recognized_text) for a in self.attempts)
        raise CaptchaUnsolvedError(len(self.attempts), detail=f"OCR reads: {reads}")

    def _capture(self) -> Path:
        try:
            return self.session.screenshot_element(
                self.selectors.captcha_image, self.session.captcha_path
            )
        except ElementNotFoundError as exc:
            raise CaptchaNotFoundError(detail=exc.detail or str(exc)) from exc

    def _refresh(self) -> None:
        selector = self.selectors.captcha_refresh
        try:
            self.page.click(selector, timeout=seconds_to_ms(self.config.short_step_timeout))
        except PWError as exc:
            raise ElementNotFoundError(selector, detail=str(exc)) from exc
        # The new image is swapped in by script without a navigation to wait on.
        self.session.pause(self.config.captcha_refresh_delay)


__all__ = ["CaptchaResolver"]

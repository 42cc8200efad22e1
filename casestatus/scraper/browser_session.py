"""Playwright-backed browser session scoped to a single case lookup."""
from __future__ import annotations

import uuid
from pathlib import Path
from typing import Any, Optional

from playwright.sync_api import (
    Browser,
    BrowserContext,
    Error as PWError,
    ElementHandle,
    Page,
    Playwright,
    TimeoutError as PWTimeout,
    sync_playwright,
)

from . import config
from .errors import ElementNotFoundError, NavigationError
from .logging_utils import _scraper_event
from .utils import log_line

# Hides the most common automation fingerprints before any site script runs.
STEALTH_INIT_SCRIPT = """
    Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
    Object.defineProperty(navigator, 'languages', { get: () => ['en-US', 'en'] });
    window.chrome = { runtime: {} };
"""


def seconds_to_ms(seconds: float) -> int:
    return int(seconds * 1000)


class BrowserSession:
    """One browser process and one page, opened once and closed exactly once."""

    def __init__(
        self,
        *,
        headless: bool = True,
        executable_path: Optional[str] = None,
        user_agent: str = config.USER_AGENT,
        launch_args: Optional[list[str]] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.headless = headless
        self.executable_path = executable_path
        self.user_agent = user_agent
        self.launch_args = list(launch_args if launch_args is not None else config.LAUNCH_ARGS)
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self.captcha_path: Path = config.CAPTCHA_DIR / f"captcha_{self.session_id}.png"

        self.page: Optional[Page] = None
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._closed = False

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------

    def open(self) -> "BrowserSession":
        if self._closed:
            raise RuntimeError("Browser session already closed")
        if self.page is not None:
            return self

        _scraper_event(
            "browser",
            step="launch",
            session_id=self.session_id,
            headless=self.headless,
        )
        try:
            self.page = self._launch()
        except Exception:
            self.close()
            raise
        return self

    def _launch(self) -> Page:
        self._playwright = sync_playwright().start()
        launch_kwargs: dict[str, Any] = {"headless": self.headless, "args": self.launch_args}
        if self.executable_path:
            launch_kwargs["executable_path"] = self.executable_path
        self._browser = self._playwright.chromium.launch(**launch_kwargs)
        self._context = self._browser.new_context(
            user_agent=self.user_agent,
            locale="en-US",
            viewport={"width": 1366, "height": 900},
        )
        self._context.add_init_script(STEALTH_INIT_SCRIPT)
        return self._context.new_page()

    def close(self) -> None:
        """Release every browser resource; safe to call more than once."""

        if self._closed:
            return
        self._closed = True

        self._shutdown()
        self.page = None

        try:
            self.captcha_path.unlink(missing_ok=True)
        except OSError as exc:
            log_line(f"Failed to remove CAPTCHA artifact {self.captcha_path}: {exc}")

        _scraper_event("browser", step="closed", session_id=self.session_id)

    def _shutdown(self) -> None:
        for label, closer in (
            ("context", self._context.close if self._context else None),
            ("browser", self._browser.close if self._browser else None),
            ("playwright", self._playwright.stop if self._playwright else None),
        ):
            if closer is None:
                continue
            try:
                closer()
            except Exception as exc:  # noqa: BLE001
                log_line(f"[SCRAPER][WARN][BROWSER] {label} close failed: {exc}")
        self._context = None
        self._browser = None
        self._playwright = None

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "BrowserSession":
        return self.open()

    def __exit__(self, *_exc: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # page helpers
    # ------------------------------------------------------------------

    def require_page(self) -> Page:
        if self.page is None:
            raise RuntimeError("Browser session is not open")
        return self.page

    def navigate(self, url: str, timeout: float) -> None:
        """Load ``url`` and wait for DOMContentLoaded within ``timeout`` seconds."""

        page = self.require_page()
        _scraper_event("nav", step="goto", url=url, timeout_s=timeout)
        try:
            page.goto(url, wait_until="domcontentloaded", timeout=seconds_to_ms(timeout))
        except PWTimeout as exc:
            raise NavigationError(f"Timed out loading {url}", detail=str(exc)) from exc
        except PWError as exc:
            raise NavigationError(f"Failed to load {url}", detail=str(exc)) from exc
        log_line(f"Page loaded: {url}")

    def wait_for_element(self, selector: str, timeout: float) -> ElementHandle:
        """Block until ``selector`` is attached and visible, or raise."""

        page = self.require_page()
        try:
            handle = page.wait_for_selector(selector, state="visible", timeout=seconds_to_ms(timeout))
        except PWTimeout as exc:
            raise ElementNotFoundError(selector, detail=str(exc)) from exc
        if handle is None:
            raise ElementNotFoundError(selector, detail="wait_for_selector returned no element")
        return handle

    def screenshot_element(self, selector: str, path: Path) -> Path:
        page = self.require_page()
        handle = page.query_selector(selector)
        if handle is None:
            raise ElementNotFoundError(selector, detail="element missing at capture time")
        path.parent.mkdir(parents=True, exist_ok=True)
        handle.screenshot(path=str(path))
        return path

    def pause(self, seconds: float) -> None:
        """Wait ``seconds`` on the page's clock if the page is still open."""

        if seconds is None or seconds <= 0 or self.page is None:
            return
        if not self.page.is_closed():
            self.page.wait_for_timeout(seconds_to_ms(seconds))

    def save_debug_screenshot(self, name: str) -> Optional[Path]:
        """Best-effort full-page screenshot for post-mortem debugging."""

        if self.page is None:
            return None
        path = config.DEBUG_DIR / f"{self.session_id}_{name}.png"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self.page.screenshot(path=str(path), full_page=True)
            log_line(f"Saved debug screenshot -> {path}")
            return path
        except Exception as exc:  # noqa: BLE001
            log_line(f"Failed to save debug screenshot: {exc}")
            return None


__all__ = ["BrowserSession", "STEALTH_INIT_SCRIPT"]

"""Configuration constants for the case status fetcher."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DATA_DIR: Path = Path(os.getenv("CASESTATUS_DATA_DIR", "data"))
LOG_DIR: Path = DATA_DIR / "logs"
LOG_FILE: Path = LOG_DIR / "latest.log"
CAPTCHA_DIR: Path = DATA_DIR / "captcha"
DEBUG_DIR: Path = DATA_DIR / "debug"

BASE_URL: str = os.getenv(
    "CASESTATUS_BASE_URL",
    "https://northeast.dcourts.gov.in/case-status-search-by-case-number/",
)
# The search form posts back to the same endpoint; any response whose URL
# contains this fragment is treated as the search result.
RESPONSE_URL_FRAGMENT: str = os.getenv("CASESTATUS_RESPONSE_URL_FRAGMENT", "case-status-search")


def _parse_timeout_seconds(env_var: str, default: float, *, minimum: float = 1) -> float:
    """Parse a timeout value in seconds from the environment with bounds."""

    try:
        value = float(os.getenv(env_var, str(default)))
    except ValueError:
        return default
    return max(minimum, value)


# Playwright timeouts (seconds)
NAV_TIMEOUT_SECONDS: float = _parse_timeout_seconds("CASESTATUS_NAV_TIMEOUT_SECONDS", 90)
# Slow form controls (radio toggle, complex dropdown, CAPTCHA image).
STEP_TIMEOUT_SECONDS: float = _parse_timeout_seconds("CASESTATUS_STEP_TIMEOUT_SECONDS", 30)
# Fields that appear right after the complex is chosen.
SHORT_STEP_TIMEOUT_SECONDS: float = _parse_timeout_seconds(
    "CASESTATUS_SHORT_STEP_TIMEOUT_SECONDS", 10
)
SUBMISSION_TIMEOUT_SECONDS: float = _parse_timeout_seconds(
    "CASESTATUS_SUBMISSION_TIMEOUT_SECONDS", 90
)
RESULT_TIMEOUT_SECONDS: float = _parse_timeout_seconds("CASESTATUS_RESULT_TIMEOUT_SECONDS", 30)

CAPTCHA_MAX_ATTEMPTS: int = int(os.getenv("CASESTATUS_CAPTCHA_MAX_ATTEMPTS", "3"))
CAPTCHA_REFRESH_DELAY_SECONDS: float = float(
    os.getenv("CASESTATUS_CAPTCHA_REFRESH_DELAY_SECONDS", "3.0")
)
CAPTCHA_MIN_LENGTH: int = int(os.getenv("CASESTATUS_CAPTCHA_MIN_LENGTH", "4"))
# Grayscale cutoff for binarising the CAPTCHA before OCR; empty disables it.
_OCR_THRESHOLD_RAW = os.getenv("CASESTATUS_OCR_THRESHOLD", "140").strip()
OCR_THRESHOLD: int | None = int(_OCR_THRESHOLD_RAW) if _OCR_THRESHOLD_RAW else None

HEADLESS: bool = os.getenv("CASESTATUS_HEADLESS", "true").strip().lower() not in {"0", "false"}
CHROME_EXECUTABLE: str | None = os.getenv("CASESTATUS_CHROME_EXECUTABLE") or None
TESSERACT_CMD: str | None = os.getenv("CASESTATUS_TESSERACT_CMD") or None

USER_AGENT: str = os.getenv(
    "CASESTATUS_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/110.0.0.0 Safari/537.36",
)

LAUNCH_ARGS: list[str] = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
    "--proxy-server=direct://",
    "--proxy-bypass-list=*",
]


@dataclass(frozen=True)
class PipelineConfig:
    """Timeouts and retry knobs for a single case lookup."""

    navigation_timeout: float = 90
    step_timeout: float = 30
    short_step_timeout: float = 10
    captcha_max_attempts: int = 3
    captcha_refresh_delay: float = 3.0
    submission_timeout: float = 90
    result_timeout: float = 30
    base_url: str = BASE_URL
    headless: bool = True

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        return cls(
            navigation_timeout=NAV_TIMEOUT_SECONDS,
            step_timeout=STEP_TIMEOUT_SECONDS,
            short_step_timeout=SHORT_STEP_TIMEOUT_SECONDS,
            captcha_max_attempts=CAPTCHA_MAX_ATTEMPTS,
            captcha_refresh_delay=CAPTCHA_REFRESH_DELAY_SECONDS,
            submission_timeout=SUBMISSION_TIMEOUT_SECONDS,
            result_timeout=RESULT_TIMEOUT_SECONDS,
            base_url=BASE_URL,
            headless=HEADLESS,
        )


__all__ = ["PipelineConfig"]

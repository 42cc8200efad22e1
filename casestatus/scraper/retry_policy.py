from __future__ import annotations

from . import config
from .logging_utils import _scraper_event


def normalize_captcha_text(raw: str | None) -> str:
    """Strip every whitespace character from raw OCR output."""

    return "".join((raw or "").split())


def is_plausible_captcha(text: str, min_length: int | None = None) -> bool:
    """Return True when ``text`` looks like a complete CAPTCHA answer.

    The CAPTCHA alphabet is not known, so length is the only check; anything
    shorter than ``min_length`` is treated as a misread.
    """

    threshold = config.CAPTCHA_MIN_LENGTH if min_length is None else min_length
    return len(text) >= threshold


def decide_captcha_retry(
    attempt_index: int,
    max_attempts: int,
    text: str,
    *,
    min_length: int | None = None,
) -> bool:
    """Decide whether to refresh the CAPTCHA and run OCR again (1-based attempts)."""

    if is_plausible_captcha(text, min_length):
        _scraper_event(
            "state",
            phase="captcha_retry_decision",
            kind="accepted",
            attempt=attempt_index,
            max_attempts=max_attempts,
            length=len(text),
            will_retry=False,
        )
        return False

    if attempt_index >= max_attempts:
        _scraper_event(
            "state",
            phase="captcha_retry_decision",
            kind="capped",
            attempt=attempt_index,
            max_attempts=max_attempts,
            length=len(text),
            will_retry=False,
        )
        return False

    _scraper_event(
        "state",
        phase="captcha_retry_decision",
        kind="too_short",
        attempt=attempt_index,
        max_attempts=max_attempts,
        length=len(text),
        will_retry=True,
    )
    return True


__all__ = ["normalize_captcha_text", "is_plausible_captcha", "decide_captcha_retry"]

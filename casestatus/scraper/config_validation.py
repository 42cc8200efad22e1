from __future__ import annotations

from typing import Literal, Optional

from .config import PipelineConfig
from .logging_utils import _scraper_event
from .utils import log_line

Entrypoint = Literal["api", "cli", "tests"]


def _raise_config_error(message: str, *, entrypoint: Entrypoint, error: str) -> None:
    _scraper_event(
        "error",
        phase="config",
        context="runtime_validation",
        error=error,
        entrypoint=entrypoint,
    )
    log_line(f"[CONFIG] {message} (entrypoint={entrypoint})")
    raise ValueError(message)


def validate_runtime_config(
    entrypoint: Entrypoint, pipeline_config: Optional[PipelineConfig] = None
) -> PipelineConfig:
    """Validate the lookup configuration for the given entrypoint.

    Raises ``ValueError`` on the first blocking misconfiguration and returns
    the validated config otherwise.
    """

    cfg = pipeline_config or PipelineConfig.from_env()

    if not cfg.base_url.strip():
        _raise_config_error(
            "BASE_URL must not be empty.", entrypoint=entrypoint, error="base_url_missing"
        )

    timeout_fields = [
        ("navigation_timeout", cfg.navigation_timeout),
        ("step_timeout", cfg.step_timeout),
        ("short_step_timeout", cfg.short_step_timeout),
        ("submission_timeout", cfg.submission_timeout),
        ("result_timeout", cfg.result_timeout),
    ]
    for field_name, value in timeout_fields:
        if value <= 0:
            _raise_config_error(
                f"{field_name} must be greater than zero.",
                entrypoint=entrypoint,
                error="invalid_timeout",
            )

    if cfg.captcha_max_attempts < 1:
        _raise_config_error(
            "captcha_max_attempts must be at least 1.",
            entrypoint=entrypoint,
            error="captcha_attempts_invalid",
        )

    if cfg.captcha_refresh_delay < 0:
        _raise_config_error(
            "captcha_refresh_delay must be non-negative.",
            entrypoint=entrypoint,
            error="captcha_refresh_delay_invalid",
        )

    return cfg


__all__ = ["validate_runtime_config", "Entrypoint"]

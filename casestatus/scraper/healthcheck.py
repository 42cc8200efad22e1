from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from . import config
from .config_validation import validate_runtime_config
from .logging_utils import _scraper_event
from .ocr import tesseract_version
from .utils import ensure_dirs, log_line


@dataclass
class HealthResult:
    ok: bool
    checks: dict[str, dict[str, Any]]


def run_health_checks(entrypoint: str = "cli") -> HealthResult:
    checks: dict[str, dict[str, Any]] = {}

    try:
        validate_runtime_config(entrypoint or "cli")
        checks["config"] = {"ok": True}
    except ValueError as exc:
        checks["config"] = {"ok": False, "error": str(exc)}

    try:
        ensure_dirs()
        writable = all(
            os.access(path, os.W_OK) for path in (config.DATA_DIR, config.CAPTCHA_DIR)
        )
        checks["filesystem"] = {
            "ok": writable,
            "data_dir": str(config.DATA_DIR),
            "captcha_dir": str(config.CAPTCHA_DIR),
        }
    except OSError as exc:
        checks["filesystem"] = {"ok": False, "error": str(exc)}

    try:
        checks["ocr"] = {"ok": True, "tesseract_version": tesseract_version()}
    except Exception as exc:  # noqa: BLE001
        checks["ocr"] = {"ok": False, "error": str(exc)}

    overall_ok = all(check.get("ok", False) for check in checks.values())

    _scraper_event(
        "state" if overall_ok else "error",
        phase="health",
        context="healthcheck",
        ok=overall_ok,
        checks=checks,
    )

    return HealthResult(ok=overall_ok, checks=checks)


__all__ = ["HealthResult", "run_health_checks"]


if __name__ == "__main__":  # pragma: no cover
    result = run_health_checks(entrypoint="cli")
    for name, info in result.checks.items():
        status = "OK" if info.get("ok") else "FAIL"
        log_line(f"[HEALTH] {name}: {status} {info}")
    raise SystemExit(0 if result.ok else 1)

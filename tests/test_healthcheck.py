from __future__ import annotations

import importlib
import sys
from pathlib import Path

import pytest

from casestatus.scraper import config, healthcheck
from tests.fakes import configure_temp_paths


def _reload_main_module():
    if "casestatus.main" in sys.modules:
        del sys.modules["casestatus.main"]
    return importlib.import_module("casestatus.main")


def test_run_health_checks_happy_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    configure_temp_paths(tmp_path, monkeypatch)
    monkeypatch.setattr(healthcheck, "tesseract_version", lambda: "5.3.0")

    result = healthcheck.run_health_checks(entrypoint="api")

    assert result.ok is True
    assert result.checks["config"]["ok"] is True
    assert result.checks["filesystem"]["ok"] is True
    assert result.checks["ocr"]["tesseract_version"] == "5.3.0"
    assert (tmp_path / "data" / "captcha").is_dir()


def test_run_health_checks_handles_invalid_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    configure_temp_paths(tmp_path, monkeypatch)
    monkeypatch.setattr(config, "CAPTCHA_MAX_ATTEMPTS", 0)
    monkeypatch.setattr(healthcheck, "tesseract_version", lambda: "5.3.0")

    result = healthcheck.run_health_checks(entrypoint="cli")

    assert result.ok is False
    assert result.checks["config"]["ok"] is False


def test_health_api_reports_status(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    configure_temp_paths(tmp_path, monkeypatch)
    monkeypatch.setattr(healthcheck, "tesseract_version", lambda: "5.3.0")

    main = _reload_main_module()
    client = main.app.test_client()

    resp = client.get("/api/health")
    assert resp.status_code == 200
    payload = resp.get_json()
    assert payload["ok"] is True
    assert "ocr" in payload["checks"]

    def _missing_binary() -> str:
        raise OSError("tesseract is not installed or it's not in your PATH")

    monkeypatch.setattr(healthcheck, "tesseract_version", _missing_binary)

    resp_unhealthy = client.get("/api/health")
    assert resp_unhealthy.status_code == 503
    data_unhealthy = resp_unhealthy.get_json()
    assert data_unhealthy["ok"] is False
    assert data_unhealthy["checks"]["ocr"]["ok"] is False

from __future__ import annotations

from pathlib import Path

import pytest
from playwright.sync_api import TimeoutError as PWTimeout

from casestatus.scraper.config import PipelineConfig
from casestatus.scraper.models import CaseQuery, CaseResult, Failure, Success
from casestatus.scraper.pipeline import CaseStatusPipeline, outcome_to_payload
from casestatus.scraper.selectors import CASE_STATUS_SELECTORS as SEL
from tests.fakes import FakePage, ScriptedOcr, SessionRecorder, configure_temp_paths

QUERY = CaseQuery(court_complex="EST01", case_type="CRL", case_number="123", case_year="2023")


def _run(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    page: FakePage,
    reads: list[str],
    query: CaseQuery = QUERY,
    **session_kwargs: object,
):
    configure_temp_paths(tmp_path, monkeypatch)
    factory = SessionRecorder(page, **session_kwargs)
    ocr = ScriptedOcr(reads)
    pipeline = CaseStatusPipeline(PipelineConfig(), session_factory=factory, ocr=ocr)
    return pipeline.run(query), factory, ocr


def test_successful_lookup(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    page = FakePage()
    outcome, factory, ocr = _run(tmp_path, monkeypatch, page, ["Ab3d"])

    assert isinstance(outcome, Success)
    assert outcome.result == CaseResult(
        case_title="State vs. John Doe",
        case_status="Pending",
        hearing_date="12-03-2024",
        order_judgment="Interim order passed",
    )
    assert outcome.captcha_attempts == 1
    assert len(ocr.calls) == 1
    assert page.values[SEL.captcha_input] == "Ab3d"

    assert len(factory.sessions) == 1
    session = factory.sessions[0]
    assert session.closed is True
    assert session.shutdown_calls == 1
    assert not session.captcha_path.exists()

    goto = page.actions[0]
    assert goto[0] == "goto"
    assert goto[2] == "domcontentloaded"
    assert goto[3] == 90_000


def test_unsolved_captcha_never_submits(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    page = FakePage()
    outcome, factory, ocr = _run(tmp_path, monkeypatch, page, ["", "a", "xy"])

    assert isinstance(outcome, Failure)
    assert outcome.error_code == "captcha_unsolved"
    assert outcome.message == "Failed to solve CAPTCHA correctly."
    assert len(ocr.calls) == 3
    assert page.submitted is False
    assert SEL.captcha_input not in page.values
    assert factory.sessions[0].shutdown_calls == 1


def test_results_marker_timeout_is_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    page = FakePage(results_appear=False)
    outcome, factory, _ = _run(tmp_path, monkeypatch, page, ["Ab3d"])

    assert isinstance(outcome, Failure)
    assert outcome.error_code == "extraction_timeout"
    assert page.submitted is True
    assert factory.sessions[0].shutdown_calls == 1
    # A debug screenshot is taken before teardown.
    assert page.screenshots


def test_navigation_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    page = FakePage(goto_error=PWTimeout("Timeout 90000ms exceeded."))
    outcome, factory, ocr = _run(tmp_path, monkeypatch, page, [])

    assert isinstance(outcome, Failure)
    assert outcome.error_code == "navigation_error"
    assert "90000ms" in (outcome.detail or "")
    assert ocr.calls == []
    assert factory.sessions[0].shutdown_calls == 1


def test_uneditable_case_number_is_step_timeout(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    page = FakePage(stuck_fields={SEL.case_number_input})
    outcome, factory, ocr = _run(tmp_path, monkeypatch, page, ["Ab3d"])

    assert isinstance(outcome, Failure)
    assert outcome.error_code == "form_step_timeout"
    assert "enter_case_number" in (outcome.detail or "")
    assert ocr.calls == []
    assert factory.sessions[0].shutdown_calls == 1


def test_incomplete_query_does_no_browser_work(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    query = CaseQuery(court_complex="EST01", case_type="", case_number="123", case_year="")
    outcome, factory, _ = _run(tmp_path, monkeypatch, FakePage(), [], query=query)

    assert isinstance(outcome, Failure)
    assert outcome.error_code == "validation_error"
    assert outcome.extra["missing"] == ["caseType", "caseYear"]
    assert factory.sessions == []


def test_launch_failure_is_internal_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    outcome, factory, _ = _run(
        tmp_path, monkeypatch, FakePage(), [], launch_error=RuntimeError("chromium missing")
    )

    assert isinstance(outcome, Failure)
    assert outcome.error_code == "internal_error"
    assert outcome.message == "An error occurred while fetching case details"
    assert "chromium missing" in (outcome.detail or "")
    assert factory.sessions[0].shutdown_calls == 1


def test_outcome_payloads(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    success, _, _ = _run(tmp_path, monkeypatch, FakePage(), ["Ab3d"])
    assert outcome_to_payload(success) == {
        "success": True,
        "data": {
            "caseTitle": "State vs. John Doe",
            "caseStatus": "Pending",
            "hearingDate": "12-03-2024",
            "orderJudgment": "Interim order passed",
        },
    }

    failure = Failure(error_code="submission_timeout", message="Timed out", detail="boom")
    assert outcome_to_payload(failure) == {
        "error": "Timed out",
        "details": "boom",
        "error_code": "submission_timeout",
    }

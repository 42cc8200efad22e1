from __future__ import annotations

from pathlib import Path

import pytest

from casestatus.scraper.captcha_resolver import CaptchaResolver
from casestatus.scraper.config import PipelineConfig
from casestatus.scraper.errors import CaptchaNotFoundError, CaptchaUnsolvedError
from casestatus.scraper.selectors import CASE_STATUS_SELECTORS as SEL
from tests.fakes import FakePage, FakeSession, ScriptedOcr, configure_temp_paths


def _resolver(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    page: FakePage,
    reads: list[str],
    **config_overrides: object,
) -> tuple[CaptchaResolver, ScriptedOcr, FakeSession]:
    configure_temp_paths(tmp_path, monkeypatch)
    session = FakeSession(page).open()
    ocr = ScriptedOcr(reads)
    return CaptchaResolver(session, ocr, PipelineConfig(**config_overrides)), ocr, session


def test_first_accepted_read_stops_loop(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    page = FakePage()
    resolver, ocr, session = _resolver(tmp_path, monkeypatch, page, ["Ab3d", "never"])

    assert resolver.resolve() == "Ab3d"
    assert len(ocr.calls) == 1
    assert ocr.calls[0] == session.captcha_path
    assert page.refreshes == 0
    assert resolver.attempts[0].accepted is True


def test_whitespace_is_stripped_before_length_check(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    resolver, ocr, _ = _resolver(tmp_path, monkeypatch, FakePage(), [" a b\n", "x Y z\tw\n"])

    assert resolver.resolve() == "xYzw"
    assert len(ocr.calls) == 2


def test_refresh_settle_and_recapture_between_attempts(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    page = FakePage()
    resolver, ocr, _ = _resolver(tmp_path, monkeypatch, page, ["", "ab", "7Kp2Q"])

    assert resolver.resolve() == "7Kp2Q"
    assert len(ocr.calls) == 3
    assert page.refreshes == 2
    assert page.pauses == [3000, 3000]
    assert page.captures == 3
    assert [a.attempt_index for a in resolver.attempts] == [1, 2, 3]


def test_three_short_reads_is_unsolved(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    page = FakePage()
    resolver, ocr, _ = _resolver(tmp_path, monkeypatch, page, ["", "a", "xy"])

    with pytest.raises(CaptchaUnsolvedError) as excinfo:
        resolver.resolve()

    assert len(ocr.calls) == 3
    assert excinfo.value.attempts == 3
    assert excinfo.value.error_code == "captcha_unsolved"
    # No pointless refresh after the final attempt.
    assert page.refreshes == 2


def test_max_attempts_comes_from_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    resolver, ocr, _ = _resolver(
        tmp_path, monkeypatch, FakePage(), ["", "", "", "", ""], captcha_max_attempts=5
    )

    with pytest.raises(CaptchaUnsolvedError):
        resolver.resolve()
    assert len(ocr.calls) == 5


def test_missing_image_fails_without_ocr(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    page = FakePage()
    page.visible.discard(SEL.captcha_image)
    resolver, ocr, _ = _resolver(tmp_path, monkeypatch, page, ["Ab3d"])

    with pytest.raises(CaptchaNotFoundError):
        resolver.resolve()

    assert ocr.calls == []
    assert resolver.attempts == []

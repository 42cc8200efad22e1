from __future__ import annotations

import pytest

from casestatus.scraper import config, retry_policy


@pytest.fixture
def event_recorder(monkeypatch: pytest.MonkeyPatch) -> list[tuple[str, dict]]:
    events: list[tuple[str, dict]] = []

    def _record(event_phase: str, **fields: object) -> None:
        events.append((event_phase, fields))

    monkeypatch.setattr(retry_policy, "_scraper_event", _record)
    return events


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Ab3d", "Ab3d"),
        (" A b\n3 d\t", "Ab3d"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_captcha_text(raw: str | None, expected: str) -> None:
    assert retry_policy.normalize_captcha_text(raw) == expected


@pytest.mark.parametrize("text, expected", [("", False), ("abc", False), ("abcd", True), ("abcdef", True)])
def test_length_acceptance(text: str, expected: bool) -> None:
    assert retry_policy.is_plausible_captcha(text) is expected


def test_min_length_follows_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "CAPTCHA_MIN_LENGTH", 6)
    assert retry_policy.is_plausible_captcha("abcde") is False
    assert retry_policy.is_plausible_captcha("abcde", min_length=5) is True


@pytest.mark.parametrize(
    "attempt, text, expected, kind",
    [
        (1, "", True, "too_short"),
        (2, "xy", True, "too_short"),
        (3, "xy", False, "capped"),
        (1, "Ab3d", False, "accepted"),
        (3, "Ab3d", False, "accepted"),
    ],
)
def test_decide_captcha_retry(
    attempt: int,
    text: str,
    expected: bool,
    kind: str,
    event_recorder: list[tuple[str, dict]],
) -> None:
    result = retry_policy.decide_captcha_retry(attempt, 3, text)
    assert result is expected
    assert len(event_recorder) == 1
    phase, fields = event_recorder[0]
    assert phase == "state"
    assert fields["phase"] == "captcha_retry_decision"
    assert fields["attempt"] == attempt
    assert fields["max_attempts"] == 3
    assert fields["will_retry"] is expected
    assert fields["kind"] == kind

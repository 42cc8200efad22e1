from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Iterator

from .utils import log_line


def _scraper_event(label: str = "", *, phase: str | None = None, **fields: Any) -> None:
    """Emit a structured scraper log line.

    ``phase`` may be used as a keyword alias for the label. When both ``label``
    and ``phase`` are provided, ``phase`` is emitted as part of the payload so
    the caller still captures the pipeline stage.
    """

    try:
        phase_label = label or (phase or "")
        if phase and label:
            fields.setdefault("phase", phase)
        payload = ", ".join(f"{k}={repr(v)}" for k, v in sorted(fields.items()))
        log_line(f"[SCRAPER][{phase_label.upper()}] {payload}")
    except Exception:
        # Never let logging break the lookup.
        return


@contextmanager
def step_events(phase: str, step: str, **fields: Any) -> Iterator[None]:
    """Wrap one pipeline step in ``start``/``done``/``failed`` events.

    Exceptions are re-raised untouched after the ``failed`` event.
    """

    started = time.monotonic()
    _scraper_event("step", phase=phase, step=step, status="start", **fields)
    try:
        yield
    except Exception as exc:
        _scraper_event(
            "error",
            phase=phase,
            step=step,
            status="failed",
            elapsed_ms=int((time.monotonic() - started) * 1000),
            error=f"{type(exc).__name__}: {exc}",
            **fields,
        )
        raise
    _scraper_event(
        "step",
        phase=phase,
        step=step,
        status="done",
        elapsed_ms=int((time.monotonic() - started) * 1000),
        **fields,
    )


__all__ = ["_scraper_event", "step_events"]

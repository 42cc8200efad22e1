"""Compose the lookup stages and translate every failure into an outcome."""
from __future__ import annotations

from typing import Any, Callable, Optional

from . import config
from .browser_session import BrowserSession
from .captcha_resolver import CaptchaResolver
from .config import PipelineConfig
from .errors import PipelineError, ValidationError
from .form_driver import FormDriver
from .logging_utils import _scraper_event
from .models import QUERY_FIELDS, CaseQuery, Failure, PipelineOutcome, Success
from .ocr import OcrEngine, TesseractOcr
from .submission import SubmissionAndExtractor
from .utils import log_exception, log_line, short_error_message

SessionFactory = Callable[[PipelineConfig], BrowserSession]


def default_session_factory(pipeline_config: PipelineConfig) -> BrowserSession:
    return BrowserSession(
        headless=pipeline_config.headless,
        executable_path=config.CHROME_EXECUTABLE,
    )


def _failure_from_error(exc: PipelineError) -> Failure:
    detail = str(exc)
    if exc.detail and exc.detail not in detail:
        detail = f"{detail}: {exc.detail}"
    extra = {}
    if isinstance(exc, ValidationError):
        extra["missing"] = exc.missing
    return Failure(error_code=exc.error_code, message=exc.summary, detail=detail, extra=extra)


class CaseStatusPipeline:
    """Run one case lookup from a fresh browser session to a ``PipelineOutcome``.

    The session is opened once per :meth:`run` and closed on every exit path.
    Nothing is retried here; only the CAPTCHA resolver retries internally.
    """

    def __init__(
        self,
        pipeline_config: Optional[PipelineConfig] = None,
        *,
        session_factory: Optional[SessionFactory] = None,
        ocr: Optional[OcrEngine] = None,
    ) -> None:
        self.config = pipeline_config or PipelineConfig.from_env()
        self.session_factory = session_factory or default_session_factory
        self._ocr = ocr

    @property
    def ocr(self) -> OcrEngine:
        if self._ocr is None:
            self._ocr = TesseractOcr(threshold=config.OCR_THRESHOLD)
        return self._ocr

    def run(self, query: CaseQuery) -> PipelineOutcome:
        if not query.is_complete():
            missing = [name for name, attr in QUERY_FIELDS.items() if not getattr(query, attr)]
            _scraper_event("error", phase="validation", missing=missing)
            return _failure_from_error(ValidationError(missing))

        _scraper_event(
            "lookup",
            step="start",
            court_complex=query.court_complex,
            case_type=query.case_type,
            case_number=query.case_number,
            case_year=query.case_year,
        )
        session = self.session_factory(self.config)
        outcome: PipelineOutcome
        try:
            session.open()
            session.navigate(self.config.base_url, self.config.navigation_timeout)

            FormDriver(session, self.config).fill(query)

            resolver = CaptchaResolver(session, self.ocr, self.config)
            captcha_text = resolver.resolve()

            submitter = SubmissionAndExtractor(session, self.config)
            submitter.submit(captcha_text)
            result = submitter.extract()
        except PipelineError as exc:
            log_exception(f"[SCRAPER][ERROR][LOOKUP] {exc.error_code}: {exc}")
            session.save_debug_screenshot(exc.error_code)
            outcome = _failure_from_error(exc)
        except Exception as exc:  # noqa: BLE001
            log_exception(f"[SCRAPER][ERROR][LOOKUP] unexpected failure: {exc}")
            session.save_debug_screenshot("internal_error")
            outcome = Failure(
                error_code=PipelineError.error_code,
                message=PipelineError.summary,
                detail=short_error_message(exc),
            )
        else:
            outcome = Success(result=result, captcha_attempts=len(resolver.attempts))
            log_line(f"Case details fetched: {result.to_dict()}")
        finally:
            session.close()

        _scraper_event(
            "lookup",
            step="finished",
            ok=outcome.ok,
            error_code=None if outcome.ok else outcome.error_code,
            session_id=session.session_id,
        )
        return outcome


def run_lookup(
    query: CaseQuery,
    pipeline_config: Optional[PipelineConfig] = None,
    *,
    session_factory: Optional[SessionFactory] = None,
    ocr: Optional[OcrEngine] = None,
) -> PipelineOutcome:
    """Convenience wrapper building a :class:`CaseStatusPipeline` for one query."""

    pipeline = CaseStatusPipeline(pipeline_config, session_factory=session_factory, ocr=ocr)
    return pipeline.run(query)


def outcome_to_payload(outcome: PipelineOutcome) -> dict[str, Any]:
    """Render an outcome as the JSON body returned to callers."""

    if isinstance(outcome, Success):
        return {"success": True, "data": outcome.result.to_dict()}
    payload: dict[str, Any] = {
        "error": outcome.message,
        "details": outcome.detail,
        "error_code": outcome.error_code,
    }
    payload.update(outcome.extra)
    return payload


__all__ = [
    "CaseStatusPipeline",
    "SessionFactory",
    "default_session_factory",
    "outcome_to_payload",
    "run_lookup",
]

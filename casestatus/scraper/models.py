"""Value types passed between the pipeline stages."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Union

NOT_AVAILABLE = "N/A"

# Wire (camelCase) name -> attribute name.
QUERY_FIELDS: dict[str, str] = {
    "courtComplex": "court_complex",
    "caseType": "case_type",
    "caseNumber": "case_number",
    "caseYear": "case_year",
}


def _clean(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def missing_fields(payload: Optional[Mapping[str, Any]]) -> list[str]:
    """Return the wire names of required query fields that are absent or blank."""

    payload = payload or {}
    return [name for name in QUERY_FIELDS if not _clean(payload.get(name))]


@dataclass(frozen=True)
class CaseQuery:
    court_complex: str
    case_type: str
    case_number: str
    case_year: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CaseQuery":
        """Build a query from a JSON body; callers check :func:`missing_fields` first."""

        return cls(**{attr: _clean(payload.get(name)) for name, attr in QUERY_FIELDS.items()})

    def is_complete(self) -> bool:
        return all((self.court_complex, self.case_type, self.case_number, self.case_year))


@dataclass
class CaptchaAttempt:
    attempt_index: int
    image_path: Path
    recognized_text: str = ""
    accepted: bool = False


@dataclass(frozen=True)
class CaseResult:
    case_title: str = NOT_AVAILABLE
    case_status: str = NOT_AVAILABLE
    hearing_date: str = NOT_AVAILABLE
    order_judgment: str = NOT_AVAILABLE

    def to_dict(self) -> dict[str, str]:
        return {
            "caseTitle": self.case_title,
            "caseStatus": self.case_status,
            "hearingDate": self.hearing_date,
            "orderJudgment": self.order_judgment,
        }


@dataclass(frozen=True)
class Success:
    result: CaseResult
    captcha_attempts: int = 0

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    error_code: str
    message: str
    detail: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False


PipelineOutcome = Union[Success, Failure]


__all__ = [
    "NOT_AVAILABLE",
    "QUERY_FIELDS",
    "CaseQuery",
    "CaptchaAttempt",
    "CaseResult",
    "Success",
    "Failure",
    "PipelineOutcome",
    "missing_fields",
]

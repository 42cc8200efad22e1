"""Command-line entrypoint for a single case lookup."""
from __future__ import annotations

import argparse
import dataclasses
import json
from typing import List, Optional

from .config import PipelineConfig
from .config_validation import validate_runtime_config
from .models import CaseQuery, missing_fields
from .pipeline import outcome_to_payload, run_lookup
from .utils import ensure_dirs, log_line, setup_run_logger


def _cli_entrypoint(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Fetch one case record from the case status site")
    parser.add_argument("--court-complex", dest="courtComplex", default="")
    parser.add_argument("--case-type", dest="caseType", default="")
    parser.add_argument("--case-number", dest="caseNumber", default="")
    parser.add_argument("--case-year", dest="caseYear", default="")
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window instead of running headless",
    )
    parser.add_argument("--max-attempts", type=int, default=None, help="CAPTCHA OCR attempts")
    parser.add_argument("--base-url", default=None)

    args = parser.parse_args(argv)
    payload = vars(args)

    missing = missing_fields(payload)
    if missing:
        print(json.dumps({"error": "Missing required fields", "missing": missing}))
        return 2

    ensure_dirs()
    setup_run_logger()

    overrides: dict[str, object] = {}
    if args.headed:
        overrides["headless"] = False
    if args.max_attempts is not None:
        overrides["captcha_max_attempts"] = args.max_attempts
    if args.base_url:
        overrides["base_url"] = args.base_url
    pipeline_config = dataclasses.replace(PipelineConfig.from_env(), **overrides)

    try:
        validate_runtime_config("cli", pipeline_config)
    except ValueError as exc:
        print(json.dumps({"error": "Invalid configuration", "details": str(exc)}))
        return 1

    outcome = run_lookup(CaseQuery.from_payload(payload), pipeline_config)
    log_line(f"Lookup finished ok={outcome.ok}")
    print(json.dumps(outcome_to_payload(outcome), indent=2))
    return 0 if outcome.ok else 1


__all__ = ["_cli_entrypoint"]


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(_cli_entrypoint())

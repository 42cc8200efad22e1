from __future__ import annotations

from flask import Flask, Response, jsonify, request

from casestatus.scraper.config_validation import validate_runtime_config
from casestatus.scraper.healthcheck import run_health_checks
from casestatus.scraper.logging_utils import _scraper_event
from casestatus.scraper.models import CaseQuery, missing_fields
from casestatus.scraper.pipeline import outcome_to_payload, run_lookup
from casestatus.scraper.utils import ensure_dirs, log_line

app = Flask(__name__)

# Create data/log/CAPTCHA directories on import so WSGI entrypoints also have
# the expected layout ready.
ensure_dirs()


@app.post("/fetch-case")
def fetch_case() -> Response:
    """Run one case lookup for the JSON body and return the extracted details."""

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}

    missing = missing_fields(payload)
    if missing:
        _scraper_event("error", phase="request", context="fetch_case", missing=missing)
        return jsonify({"error": "Missing required fields", "missing": missing}), 400

    try:
        pipeline_config = validate_runtime_config("api")
    except ValueError as exc:
        return jsonify({"error": "Invalid configuration", "details": str(exc)}), 500

    query = CaseQuery.from_payload(payload)
    log_line(
        f"Lookup requested: complex={query.court_complex} type={query.case_type} "
        f"number={query.case_number}/{query.case_year}"
    )
    outcome = run_lookup(query, pipeline_config)

    body = outcome_to_payload(outcome)
    return jsonify(body), 200 if outcome.ok else 500


@app.get("/api/health")
def api_health() -> Response:
    """Return a JSON health summary for configuration, filesystem and OCR."""

    result = run_health_checks(entrypoint="api")
    status = 200 if result.ok else 503
    return jsonify({"ok": result.ok, "checks": result.checks}), status


if __name__ == "__main__":
    app.run(debug=True)

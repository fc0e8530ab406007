from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date
from io import BytesIO

from flask import Blueprint, jsonify, request, send_file

from services.config_bridge import get_cfg
from services.exceptions import PayloadValidationError, ReportIntegrityError
from services.weekly_reports.api import (
    report_filename,
    run_availability,
    run_export,
    run_preview,
    week_options,
)

reports_bp = Blueprint("reports", __name__, url_prefix="/reports")

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

logger = logging.getLogger(__name__)


def _json_payload() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise PayloadValidationError("Expected a JSON object body.")
    return payload


def _list_field(payload: dict, name: str) -> list:
    value = payload.get(name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise PayloadValidationError(f"'{name}' must be a list.")
    return value


@reports_bp.errorhandler(PayloadValidationError)
def _bad_payload(exc: PayloadValidationError):
    logger.warning("Rejected report payload: %s", exc.message)
    return jsonify(error=exc.message), 400


@reports_bp.errorhandler(ReportIntegrityError)
def _integrity(exc: ReportIntegrityError):
    logger.error("Report integrity error: %s", exc.message)
    return jsonify(error=exc.message), 422


@reports_bp.post("/export")
def export():
    """
    Consolidated workbook for every week present in `reports`.
    Body: {"reports": [...], "locations": [...]}.
    """
    payload = _json_payload()
    res = run_export(
        report_rows=_list_field(payload, "reports"),
        location_rows=_list_field(payload, "locations"),
        weekly_reports_cfg=get_cfg(),
    )

    if res["content"] is None:
        return jsonify(error="No reports found for the selected range."), 404

    logger.info("Exporting %d week sheet(s): %s", res["weeks"], ", ".join(res["sheets"]))
    return send_file(
        BytesIO(res["content"]),
        as_attachment=True,
        download_name=report_filename(date.today()),
        mimetype=XLSX_MIMETYPE,
    )


@reports_bp.post("/preview")
def preview():
    """Live metrics for an in-progress submission. Body: the raw field values."""
    res = run_preview(_json_payload())
    return jsonify(metrics=asdict(res["metrics"]), display=res["display"])


@reports_bp.post("/availability")
def availability():
    """Body: {"reports": [...], "locations": [...], "weekStartDate": "YYYY-MM-DD"}."""
    payload = _json_payload()
    week_start = payload.get("weekStartDate")
    if not week_start:
        raise PayloadValidationError("'weekStartDate' is required.")
    rows = run_availability(
        report_rows=_list_field(payload, "reports"),
        location_rows=_list_field(payload, "locations"),
        week_start=week_start,
    )
    return jsonify(rows)


@reports_bp.get("/weeks")
def weeks():
    return jsonify(week_options(date.today(), get_cfg()))

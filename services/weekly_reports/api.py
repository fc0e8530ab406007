# services/weekly_reports/api.py
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .aggregate import aggregate_reports, report_availability
from .excel_out import build_workbook
from .metrics import format_preview, preview_metrics
from .parse import parse_iso_date, recent_weeks
from .records import locations_from_rows, reports_from_rows
from .settings import ReportSettings, settings_from_config
from services.exceptions import PayloadValidationError

logger = logging.getLogger(__name__)


def report_filename(today: date) -> str:
    return f"Reports_{today.isoformat()}.xlsx"


def run_export(
    *,
    report_rows: Iterable[Mapping[str, Any]],
    location_rows: Iterable[Mapping[str, Any]],
    weekly_reports_cfg: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Full export: raw report dicts + catalog dicts -> .xlsx bytes.

    Returns {"content": bytes | None, "sheets": [sheet names], "weeks": n}.
    `content` is None when there was nothing to report.
    """
    settings = settings_from_config(weekly_reports_cfg)
    reports = reports_from_rows(report_rows)
    locations = locations_from_rows(location_rows)

    buckets = aggregate_reports(reports, locations, settings)
    handler = build_workbook(buckets, settings)

    return {
        "content": handler.to_bytes(),
        "sheets": handler.get_sheet_names(),
        "weeks": len(buckets),
    }


def run_preview(fields: Mapping[str, Any]) -> Dict[str, Any]:
    metrics = preview_metrics(fields)
    return {
        "metrics": metrics,
        "display": format_preview(metrics),
    }


def run_availability(
    *,
    report_rows: Iterable[Mapping[str, Any]],
    location_rows: Iterable[Mapping[str, Any]],
    week_start,
) -> List[dict]:
    try:
        start = parse_iso_date(week_start)
    except ValueError as e:
        raise PayloadValidationError(f"Invalid weekStartDate {week_start!r}: {e}") from e
    return report_availability(reports_from_rows(report_rows), locations_from_rows(location_rows), start)


def week_options(today: date, weekly_reports_cfg: Optional[Mapping[str, Any]] = None) -> List[dict]:
    settings = settings_from_config(weekly_reports_cfg) if weekly_reports_cfg else ReportSettings()
    return recent_weeks(today, settings.recent_weeks)

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Iterable, List, Mapping, Optional

from services.exceptions import PayloadValidationError

from .model import RAW_FIELDS, Location, WeeklyReport
from .parse import parse_iso_date, week_end_for

logger = logging.getLogger(__name__)


def location_from_row(row: Mapping[str, Any]) -> Location:
    try:
        return Location(
            id=row["id"],
            name=str(row.get("name") or "").strip(),
            state=str(row.get("state") or "").strip(),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise PayloadValidationError(f"Location record is missing an id: {row!r}") from e


def locations_from_rows(rows: Optional[Iterable[Mapping[str, Any]]]) -> List[Location]:
    return [location_from_row(r) for r in (rows or [])]


def report_from_row(row: Mapping[str, Any]) -> WeeklyReport:
    """
    One stored/submitted report dict to a WeeklyReport.

    Only the twelve raw counters are kept. Any derived figure the store
    may have persisted alongside them is dropped here on purpose.
    """
    if not isinstance(row, Mapping):
        raise PayloadValidationError(f"Report record is not an object: {row!r}")

    embedded = row.get("location")
    location = location_from_row(embedded) if isinstance(embedded, Mapping) else None
    location_id = row.get("locationId")
    if location_id is None and location is not None:
        location_id = location.id

    try:
        week_start = parse_iso_date(row["weekStartDate"]) if row.get("weekStartDate") else None
        week_end = parse_iso_date(row["weekEndDate"]) if row.get("weekEndDate") else None
    except ValueError as e:
        raise PayloadValidationError(f"Invalid report date in {row!r}: {e}") from e

    if week_end is None:
        if week_start is None:
            raise PayloadValidationError(f"Report has neither weekStartDate nor weekEndDate: {row!r}")
        week_end = week_end_for(week_start)
    if week_start is None:
        week_start = week_end - timedelta(days=6)

    return WeeklyReport(
        location_id=location_id,
        location=location,
        week_start=week_start,
        week_end=week_end,
        fields={k: row.get(k) for k in RAW_FIELDS},
    )


def reports_from_rows(rows: Optional[Iterable[Mapping[str, Any]]]) -> List[WeeklyReport]:
    reports = [report_from_row(r) for r in (rows or [])]
    logger.debug("Loaded %d weekly reports", len(reports))
    return reports

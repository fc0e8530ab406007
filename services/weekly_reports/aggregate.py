from __future__ import annotations

import logging
import math
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from services.exceptions import ReportIntegrityError

from .metrics import row_values
from .model import AggregationBucket, Location, WeeklyReport
from .parse import is_number
from .settings import ReportSettings

logger = logging.getLogger(__name__)


def sort_locations(locations: Iterable[Location]) -> List[Location]:
    """Sheet column order: by state, then by name, then by id."""
    return sorted(locations, key=lambda loc: (loc.state, loc.name, str(loc.id)))


def group_by_week(reports: Iterable[WeeklyReport]) -> Dict[date, List[WeeklyReport]]:
    by_week: Dict[date, List[WeeklyReport]] = defaultdict(list)
    for report in reports:
        by_week[report.week_end].append(report)
    return dict(by_week)


def _resolve_location(report: WeeklyReport, catalog: Dict[str, Location]) -> Location:
    key = report.location_id if report.location_id is not None else (
        report.location.id if report.location else None
    )
    loc = catalog.get(str(key)) if key is not None else None
    if loc is None:
        raise ReportIntegrityError(
            f"Report for week ending {report.week_end.isoformat()} references "
            f"location {key!r}, which is not in the location catalog."
        )
    return loc


def _add(acc: Dict[str, float], key: str, value) -> None:
    # A bad value poisons the whole sum; the sheet shows it blank.
    if not is_number(value):
        acc[key] = math.nan
    else:
        acc[key] = acc.get(key, 0) + value


def _build_bucket(
    week_end: date,
    week_reports: Sequence[WeeklyReport],
    catalog: Dict[str, Location],
    ordered: Sequence[Location],
    settings: ReportSettings,
) -> AggregationBucket:
    location_values: Dict[str, Dict[str, float]] = {}
    for report in week_reports:
        loc = _resolve_location(report, catalog)
        if str(loc.id) in location_values:
            logger.warning(
                "Duplicate report for %s week ending %s; using the later one.",
                loc.name, week_end.isoformat(),
            )
        location_values[str(loc.id)] = row_values(report.fields)

    if settings.include_unreported_locations:
        columns = tuple(ordered)
    else:
        columns = tuple(loc for loc in ordered if str(loc.id) in location_values)

    bucket = AggregationBucket(
        week_end=week_end,
        locations=columns,
        groups=settings.state_groups,
        location_values=location_values,
    )

    keys = [row.key for row in settings.metric_rows]
    for loc in ordered:
        values = location_values.get(str(loc.id))
        if values is None:
            continue
        group = settings.group_for_state(loc.state)
        if group is not None:
            acc = bucket.group_values.setdefault(group.key, {})
            for key in keys:
                _add(acc, key, values.get(key))
        for key in keys:
            _add(bucket.totals, key, values.get(key))

    return bucket


def aggregate_reports(
    reports: Iterable[WeeklyReport],
    locations: Iterable[Location],
    settings: Optional[ReportSettings] = None,
) -> List[AggregationBucket]:
    """
    One bucket per distinct week-ending date, oldest first.

    Rollups are plain sums of the per-location values, ratios included:
    a state's "Avg. Retail Visit" is the sum of its locations' averages.
    """
    settings = settings or ReportSettings()
    locations = list(locations)
    if not locations:
        raise ReportIntegrityError("The location catalog is empty; cannot build the report.")

    catalog = {str(loc.id): loc for loc in locations}
    ordered = sort_locations(locations)
    by_week = group_by_week(reports)

    buckets = [
        _build_bucket(week_end, by_week[week_end], catalog, ordered, settings)
        for week_end in sorted(by_week)
    ]
    logger.info("Aggregated %d week(s) across %d location(s)", len(buckets), len(ordered))
    return buckets


def cell_value(values: Optional[Dict[str, float]], key: str):
    """The number to write, or '' for no submission / not a number."""
    if values is None:
        return ""
    value = values.get(key)
    return value if is_number(value) else ""


def report_availability(
    reports: Iterable[WeeklyReport],
    locations: Iterable[Location],
    week_start: date,
) -> List[dict]:
    """Which catalog locations have submitted for the week starting `week_start`."""
    submitted = {
        str(r.location_id if r.location_id is not None else (r.location.id if r.location else None))
        for r in reports
        if r.week_start == week_start
    }
    return [
        {
            "id": loc.id,
            "name": loc.name,
            "state": loc.state,
            "isDataAvailable": str(loc.id) in submitted,
        }
        for loc in sort_locations(locations)
    ]

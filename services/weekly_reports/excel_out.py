from __future__ import annotations

from typing import Iterable, List, Optional

from services.excel import OpenPyXLFileHandler, SheetGrid

from .aggregate import cell_value
from .model import AggregationBucket
from .parse import display_long_date, sheet_name_for
from .settings import ReportSettings

TOTALS_LABEL = "Totals"


def _column_widths(bucket: AggregationBucket, settings: ReportSettings) -> dict:
    w = settings.column_widths
    longest_label = max((len(row.label) for row in settings.metric_rows), default=0)
    widths = {0: max(w.label_min, longest_label)}
    col = 1
    for _ in range(1 + len(bucket.groups)):  # Totals + groups
        widths[col] = w.rollup
        col += 1
    for loc in bucket.locations:
        widths[col] = max(len(loc.name), w.location_min)
        col += 1
    return widths


def layout_sheet(bucket: AggregationBucket, settings: Optional[ReportSettings] = None) -> SheetGrid:
    """
    Row 0: title. Row 1: headers. Then one row per metric:
    label, Totals, each state group, each location.
    """
    settings = settings or ReportSettings()

    rows: List[List[object]] = [
        [f"Week Ending {display_long_date(bucket.week_end)}"],
        ["", TOTALS_LABEL]
        + [g.label for g in bucket.groups]
        + [loc.name for loc in bucket.locations],
    ]

    for metric in settings.metric_rows:
        row: List[object] = [metric.label, cell_value(bucket.totals, metric.key)]
        row += [cell_value(bucket.group_values.get(g.key), metric.key) for g in bucket.groups]
        row += [cell_value(bucket.location_values.get(str(loc.id)), metric.key) for loc in bucket.locations]
        rows.append(row)

    return SheetGrid(
        title=sheet_name_for(bucket.week_end),
        rows=rows,
        bold_rows=(0, 1),
        column_widths=_column_widths(bucket, settings),
    )


def build_workbook(
    buckets: Iterable[AggregationBucket],
    settings: Optional[ReportSettings] = None,
) -> OpenPyXLFileHandler:
    """One sheet per bucket, in bucket order. No buckets, no sheets."""
    return OpenPyXLFileHandler.from_sheet_grids([layout_sheet(b, settings) for b in buckets])

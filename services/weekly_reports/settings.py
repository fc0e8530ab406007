from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from .model import MetricRow, StateGroup

DEFAULT_STATE_GROUPS: Tuple[StateGroup, ...] = (
    StateGroup(key="ILL", label="ILL", states=("ILL",)),
    StateGroup(key="GA", label="GA / SC", states=("GA",)),
)

# Sheet row order, as the ops template expects it.
DEFAULT_METRIC_ROWS: Tuple[MetricRow, ...] = (
    MetricRow("Car Count Mon - Fri", "carCountMonFri"),
    MetricRow("Car Count Sat - Sun", "carCountSatSun"),
    MetricRow("Retail Car Count Mon - Fri", "retailCarCountMonFri"),
    MetricRow("Retail Car Count Sat - Sun", "retailCarCountSatSun"),
    MetricRow("Total Cars", "totalCars"),
    MetricRow("Retail Revenue Mon - Fri", "retailRevenueMonFri"),
    MetricRow("Retail Revenue Sat - Sun", "retailRevenueSatSun"),
    MetricRow("Total Revenue Mon - Fri", "totalRevenueMonFri"),
    MetricRow("Total Revenue Sat - Sun", "totalRevenueSatSun"),
    MetricRow("Total Revenue", "totalRevenue"),
    MetricRow("Avg. Retail Visit", "avgRetailVisit"),
    MetricRow("Avg. Member Visit", "avgMemberVisit"),
    MetricRow("Staff Hours Mon - Fri", "staffHoursMonFri"),
    MetricRow("Staff Hours Sat - Sun", "staffHoursSatSun"),
    MetricRow("Cars Per Labor Hour Mon - Fri", "carsPerLaborHourMonFri"),
    MetricRow("Cars Per Labor Hour Sat & Sun", "carsPerLaborHourSatSun"),
    MetricRow("Total Cars Per Man Hour", "totalCarsPerManHour"),
    MetricRow("Total Club Plans Sold", "totalClubPlansSold"),
    MetricRow("Conversion Rate", "conversionRate"),
    MetricRow("Total Club Plan Members", "totalClubPlanMembers"),
)


@dataclass(frozen=True)
class ColumnWidths:
    label_min: int = 40
    rollup: int = 10
    location_min: int = 15


@dataclass(frozen=True)
class ReportSettings:
    state_groups: Tuple[StateGroup, ...] = DEFAULT_STATE_GROUPS
    metric_rows: Tuple[MetricRow, ...] = DEFAULT_METRIC_ROWS
    column_widths: ColumnWidths = ColumnWidths()
    include_unreported_locations: bool = True
    recent_weeks: int = 4

    def group_for_state(self, state: str) -> Optional[StateGroup]:
        for group in self.state_groups:
            if state in group.states:
                return group
        return None


def settings_from_config(cfg: Optional[Mapping[str, Any]]) -> ReportSettings:
    """
    Build ReportSettings from the `weekly_reports` config section.
    Missing keys keep their defaults.
    """
    cfg = cfg or {}
    kwargs: Dict[str, Any] = {}

    groups = cfg.get("state_groups")
    if groups:
        kwargs["state_groups"] = tuple(
            StateGroup(
                key=str(g["key"]),
                label=str(g.get("label") or g["key"]),
                states=tuple(str(s) for s in (g.get("states") or [g["key"]])),
            )
            for g in groups
        )

    rows = cfg.get("metric_rows")
    if rows:
        kwargs["metric_rows"] = tuple(MetricRow(label=str(r["label"]), key=str(r["key"])) for r in rows)

    widths = cfg.get("column_widths")
    if widths:
        defaults = ColumnWidths()
        kwargs["column_widths"] = ColumnWidths(
            label_min=int(widths.get("label_min", defaults.label_min)),
            rollup=int(widths.get("rollup", defaults.rollup)),
            location_min=int(widths.get("location_min", defaults.location_min)),
        )

    if "include_unreported_locations" in cfg:
        kwargs["include_unreported_locations"] = bool(cfg["include_unreported_locations"])
    if "recent_weeks" in cfg:
        kwargs["recent_weeks"] = int(cfg["recent_weeks"])

    return ReportSettings(**kwargs)

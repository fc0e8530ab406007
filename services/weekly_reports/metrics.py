from __future__ import annotations

from dataclasses import asdict
from typing import Dict, Mapping

from .model import AMOUNT_FIELDS, COUNT_FIELDS, DerivedMetrics
from .parse import parse_amount, parse_count, round2


def parse_raw_fields(fields: Mapping[str, object]) -> Dict[str, float]:
    """All twelve counters parsed; anything missing or junk is 0."""
    fields = fields or {}
    raw: Dict[str, float] = {k: parse_count(fields.get(k)) for k in COUNT_FIELDS}
    raw.update({k: parse_amount(fields.get(k)) for k in AMOUNT_FIELDS})
    return raw


def _ratio(numerator: float, denominator: float) -> float:
    return round2(numerator / denominator) if denominator else 0


def calculate_metrics(fields: Mapping[str, object]) -> DerivedMetrics:
    """
    Derive the weekly ratios and sums for one location-week.

    The one formula set behind both the live preview and the export.
    Total: never raises, whatever is in `fields`.
    """
    r = parse_raw_fields(fields)

    total_cars = r["carCountMonFri"] + r["carCountSatSun"]
    total_revenue = r["totalRevenueMonFri"] + r["totalRevenueSatSun"]
    total_retail_cars = r["retailCarCountMonFri"] + r["retailCarCountSatSun"]
    total_retail_revenue = r["retailRevenueMonFri"] + r["retailRevenueSatSun"]
    total_hours = r["staffHoursMonFri"] + r["staffHoursSatSun"]

    if total_cars and total_cars != total_retail_cars:
        avg_member_visit = round2(
            (total_revenue - total_retail_revenue) / (total_cars - total_retail_cars)
        )
    else:
        avg_member_visit = 0

    return DerivedMetrics(
        totalCars=total_cars,
        totalRevenue=total_revenue,
        avgRetailVisit=_ratio(total_retail_revenue, total_retail_cars),
        avgMemberVisit=avg_member_visit,
        carsPerLaborHourMonFri=_ratio(r["carCountMonFri"], r["staffHoursMonFri"]),
        carsPerLaborHourSatSun=_ratio(r["carCountSatSun"], r["staffHoursSatSun"]),
        totalCarsPerManHour=_ratio(total_cars, total_hours),
        conversionRate=_ratio(r["totalClubPlansSold"], total_retail_cars),
    )


def row_values(fields: Mapping[str, object]) -> Dict[str, float]:
    """Parsed raw counters plus derived metrics, keyed by metric key."""
    values = parse_raw_fields(fields)
    values.update(asdict(calculate_metrics(fields)))
    return values


# ---- live preview ----

def _plain(n: float) -> str:
    return str(int(n)) if float(n).is_integer() else str(n)


def preview_metrics(fields: Mapping[str, object]) -> DerivedMetrics:
    """In-progress wizard values, not yet saved. Same shape as the export."""
    return calculate_metrics(fields)


def format_preview(metrics: DerivedMetrics) -> Dict[str, str]:
    """Display strings for the summary step: two decimals, conversion as a percent."""
    return {
        "totalCars": str(metrics.totalCars),
        "totalRevenue": _plain(metrics.totalRevenue),
        "avgRetailVisit": f"{metrics.avgRetailVisit:.2f}",
        "avgMemberVisit": f"{metrics.avgMemberVisit:.2f}",
        "carsPerLaborHourMonFri": f"{metrics.carsPerLaborHourMonFri:.2f}",
        "carsPerLaborHourSatSun": f"{metrics.carsPerLaborHourSatSun:.2f}",
        "totalCarsPerManHour": f"{metrics.totalCarsPerManHour:.2f}",
        "conversionRate": f"{metrics.conversionRate * 100:.2f}%",
    }

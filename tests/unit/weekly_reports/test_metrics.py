# tests/unit/weekly_reports/test_metrics.py
from dataclasses import asdict

import pytest

from services.weekly_reports.metrics import (
    calculate_metrics,
    format_preview,
    parse_raw_fields,
    preview_metrics,
    row_values,
)
from services.weekly_reports.model import RAW_FIELDS


@pytest.mark.parametrize("junk", ["", None, "abc", "   ", "NaN", "-", "Infinity"])
def test_all_junk_fields_give_all_zero_metrics(junk):
    metrics = calculate_metrics({k: junk for k in RAW_FIELDS})
    assert all(v == 0 for v in asdict(metrics).values())


def test_missing_fields_give_all_zero_metrics():
    assert all(v == 0 for v in asdict(calculate_metrics({})).values())
    assert all(v == 0 for v in asdict(calculate_metrics(None)).values())


def test_labour_hour_example():
    m = calculate_metrics({
        "carCountMonFri": "100",
        "carCountSatSun": "50",
        "staffHoursMonFri": "20",
        "staffHoursSatSun": "10",
    })
    assert m.totalCars == 150
    assert m.carsPerLaborHourMonFri == 5.00
    assert m.carsPerLaborHourSatSun == 5.00
    assert m.totalCarsPerManHour == 5.00


def test_avg_retail_visit_example():
    m = calculate_metrics({
        "retailRevenueMonFri": "1000",
        "retailRevenueSatSun": "500",
        "retailCarCountMonFri": "50",
        "retailCarCountSatSun": "25",
    })
    assert m.avgRetailVisit == 20.00


def test_avg_retail_visit_zero_without_retail_cars():
    m = calculate_metrics({"retailRevenueMonFri": "1000", "retailRevenueSatSun": "500"})
    assert m.avgRetailVisit == 0
    assert m.conversionRate == 0


def test_ratios_are_rounded_to_two_places():
    m = calculate_metrics({
        "carCountMonFri": "100",
        "staffHoursMonFri": "3",
        "retailRevenueMonFri": "10",
        "retailCarCountMonFri": "3",
        "totalClubPlansSold": "1",
    })
    assert m.carsPerLaborHourMonFri == 33.33
    assert m.totalCarsPerManHour == 33.33
    assert m.avgRetailVisit == 3.33
    assert m.conversionRate == 0.33


def test_rounding_is_half_up():
    # 1.125 is exact in binary; banker's rounding would give 1.12
    m = calculate_metrics({"retailRevenueMonFri": "9", "retailCarCountMonFri": "8"})
    assert m.avgRetailVisit == 1.13


def test_sums_are_not_rounded():
    m = calculate_metrics({"totalRevenueMonFri": "100.125", "totalRevenueSatSun": "0.001"})
    assert m.totalRevenue == pytest.approx(100.126)


def test_avg_member_visit():
    m = calculate_metrics({
        "carCountMonFri": "80", "carCountSatSun": "20",
        "retailCarCountMonFri": "30", "retailCarCountSatSun": "10",
        "totalRevenueMonFri": "1600", "totalRevenueSatSun": "400",
        "retailRevenueMonFri": "600", "retailRevenueSatSun": "200",
    })
    assert m.avgMemberVisit == 20.0


def test_avg_member_visit_zero_when_every_car_is_retail():
    m = calculate_metrics({
        "carCountMonFri": "10", "retailCarCountMonFri": "10",
        "totalRevenueMonFri": "500", "retailRevenueMonFri": "200",
    })
    assert m.avgMemberVisit == 0


def test_counts_parse_as_integers_and_amounts_as_floats():
    raw = parse_raw_fields({"carCountMonFri": "12.7", "staffHoursMonFri": "7.5", "totalClubPlansSold": "3abc"})
    assert raw["carCountMonFri"] == 12
    assert isinstance(raw["carCountMonFri"], int)
    assert raw["staffHoursMonFri"] == 7.5
    assert raw["totalClubPlansSold"] == 3


def test_stored_derived_fields_are_ignored():
    fields = {"carCountMonFri": "0", "carCountSatSun": "0", "totalCars": 999, "avgRetailVisit": 42}
    values = row_values(fields)
    assert values["totalCars"] == 0
    assert values["avgRetailVisit"] == 0


def test_row_values_echo_raw_counters():
    values = row_values({"carCountMonFri": "7", "staffHoursSatSun": "2.5", "totalClubPlanMembers": "40"})
    assert values["carCountMonFri"] == 7
    assert values["staffHoursSatSun"] == 2.5
    assert values["totalClubPlanMembers"] == 40
    assert values["totalCars"] == 7


def test_preview_uses_same_formulas_as_export():
    fields = {"carCountMonFri": "100", "carCountSatSun": "50", "staffHoursMonFri": "20", "staffHoursSatSun": "10"}
    assert preview_metrics(fields) == calculate_metrics(fields)


def test_format_preview():
    m = calculate_metrics({
        "carCountMonFri": "100", "staffHoursMonFri": "30",
        "retailCarCountMonFri": "50", "totalClubPlansSold": "5",
        "totalRevenueMonFri": "1500",
    })
    display = format_preview(m)
    assert display["totalCars"] == "100"
    assert display["totalRevenue"] == "1500"
    assert display["totalCarsPerManHour"] == "3.33"
    assert display["conversionRate"] == "10.00%"
    assert display["avgRetailVisit"] == "0.00"


def test_extreme_inputs_do_not_raise():
    m = calculate_metrics({"carCountMonFri": "100", "staffHoursMonFri": "1e-320"})
    assert m.carsPerLaborHourMonFri == 0
    m = calculate_metrics({"carCountMonFri": "9007199254740992", "staffHoursMonFri": "1"})
    assert m.carsPerLaborHourMonFri == 2 ** 53


@pytest.mark.parametrize("fields", [
    {"carCountMonFri": "1e308", "carCountSatSun": "1e308", "staffHoursMonFri": "1"},
    {"carCountMonFri": 10 ** 400, "staffHoursMonFri": "1"},
    {"carCountMonFri": "1" * 400, "retailCarCountMonFri": "5"},
])
def test_counts_too_large_for_a_float_read_as_zero(fields):
    m = calculate_metrics(fields)
    assert m.totalCars == 0
    assert m.carsPerLaborHourMonFri == 0
    assert row_values(fields)["carCountMonFri"] == 0


def test_huge_amounts_do_not_raise():
    m = calculate_metrics({
        "totalRevenueMonFri": "1e308", "totalRevenueSatSun": "1e308",
        "retailRevenueMonFri": "1e308", "retailRevenueSatSun": "1e308",
        "carCountMonFri": "10", "retailCarCountMonFri": "5",
    })
    assert m.avgMemberVisit == 0
    assert m.avgRetailVisit == 0

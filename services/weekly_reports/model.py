from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Mapping, Optional, Tuple, Union

# Raw counter keys as submitted by a location (camelCase, as stored).
COUNT_FIELDS: Tuple[str, ...] = (
    "carCountMonFri",
    "carCountSatSun",
    "retailCarCountMonFri",
    "retailCarCountSatSun",
    "totalClubPlansSold",
    "totalClubPlanMembers",
)
AMOUNT_FIELDS: Tuple[str, ...] = (
    "retailRevenueMonFri",
    "retailRevenueSatSun",
    "totalRevenueMonFri",
    "totalRevenueSatSun",
    "staffHoursMonFri",
    "staffHoursSatSun",
)
RAW_FIELDS: Tuple[str, ...] = COUNT_FIELDS + AMOUNT_FIELDS


@dataclass(frozen=True)
class Location:
    id: Union[int, str]
    name: str
    state: str


@dataclass(frozen=True)
class WeeklyReport:
    location_id: Optional[Union[int, str]]
    location: Optional[Location]         # embedded copy when the store sends one
    week_start: Optional[date]
    week_end: date
    fields: Mapping[str, object]         # the twelve raw counters, unparsed


@dataclass(frozen=True)
class DerivedMetrics:
    totalCars: int
    totalRevenue: float
    avgRetailVisit: float
    avgMemberVisit: float
    carsPerLaborHourMonFri: float
    carsPerLaborHourSatSun: float
    totalCarsPerManHour: float
    conversionRate: float


@dataclass(frozen=True)
class StateGroup:
    key: str
    label: str
    states: Tuple[str, ...]


@dataclass(frozen=True)
class MetricRow:
    label: str
    key: str


@dataclass
class AggregationBucket:
    week_end: date
    locations: Tuple[Location, ...]                         # column order
    groups: Tuple[StateGroup, ...]                          # column order
    location_values: Dict[str, Dict[str, float]] = field(default_factory=dict)  # str(location id) -> row values
    group_values: Dict[str, Dict[str, float]] = field(default_factory=dict)
    totals: Dict[str, float] = field(default_factory=dict)

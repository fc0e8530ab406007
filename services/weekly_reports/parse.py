from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Dict, List

# Leading number, the way a browser's parseFloat reads it ("12abc" -> 12).
_LEADING_NUMBER_RE = re.compile(
    r"""
    ^\s*
    (?P<num>
        [+-]?
        (?:\d+(?:\.\d*)?|\.\d+)      # 12, 12., 12.5, .5
        (?:[eE][+-]?\d+)?            # exponent
    )
    """,
    re.VERBOSE,
)

_TWO_PLACES = Decimal("0.01")

# Largest count that still sums and divides exactly as a float.
_MAX_COUNT = 2 ** 53


def _leading_float(value) -> float:
    """
    Read a float out of anything a form or store may hand us.
    Never raises: None, '', 'abc', NaN, inf and numbers too large for a
    float all come back as 0.0. '1,200' reads as 1, like parseFloat.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        try:
            n = float(value)
        except OverflowError:
            return 0.0
    else:
        m = _LEADING_NUMBER_RE.match(str(value))
        if not m:
            return 0.0
        n = float(m.group("num"))
    if math.isnan(n) or math.isinf(n):
        return 0.0
    return n


def parse_count(value) -> int:
    """Car counts and plan counts: integers, truncated toward zero. Out-of-range counts read as 0."""
    n = _leading_float(value)
    if abs(n) > _MAX_COUNT:
        return 0
    return int(n)


def parse_amount(value) -> float:
    """Revenue and staff hours."""
    return _leading_float(value)


def round2(n: float) -> float:
    """Round half up to 2 places (1.005 -> 1.01, 2.675 -> 2.68). Non-finite input gives 0."""
    if math.isnan(n) or math.isinf(n):
        return 0.0
    # enough digits for any finite float, so quantize never overflows
    with localcontext() as ctx:
        ctx.prec = 400
        return float(Decimal(str(n)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def is_number(value) -> bool:
    if value is None or isinstance(value, bool):
        return False
    if not isinstance(value, (int, float)):
        return False
    try:
        n = float(value)
    except OverflowError:
        return False
    return not (math.isnan(n) or math.isinf(n))


def parse_iso_date(value) -> date:
    """
    Accept a date, a datetime, 'YYYY-MM-DD' or a full ISO timestamp
    ('2024-01-07T00:00:00.000Z'). Raise ValueError if invalid.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value or "").strip()
    if not s:
        raise ValueError("empty date")
    # date-level granularity only; the time part is dropped
    return datetime.strptime(s[:10], "%Y-%m-%d").date()


def week_end_for(week_start: date) -> date:
    return week_start + timedelta(days=6)


def sheet_name_for(week_end: date) -> str:
    """'M-DD-YY', e.g. 1-07-24."""
    return f"{week_end.month}-{week_end:%d-%y}"


def display_long_date(d: date) -> str:
    """'January 7, 2024'."""
    return f"{d:%B} {d.day}, {d.year}"


def display_short_date(d: date) -> str:
    """'Jan 7, 2024'."""
    return f"{d:%b} {d.day}, {d.year}"


def recent_weeks(today: date, count: int = 4) -> List[Dict[str, str]]:
    """
    The last `count` Monday-start weeks up to and including the current one,
    oldest first.
    """
    this_monday = today - timedelta(days=today.weekday())
    weeks = []
    for i in range(count):
        start = this_monday - timedelta(weeks=i)
        weeks.append({
            "label": f"{display_short_date(start)} - {display_short_date(week_end_for(start))}",
            "value": start.isoformat(),
        })
    weeks.reverse()
    return weeks

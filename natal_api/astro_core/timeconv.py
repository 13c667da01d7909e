"""
Civil time -> Julian Day.

Dates are proleptic Gregorian. Local times are normalized to UTC with a
signed hour offset (east positive, e.g. 5.5 for IST); the UTC hour may
cross midnight, in which case the date is rolled by one day.
"""

from __future__ import annotations

import calendar
import math
from dataclasses import dataclass, asdict
from typing import Any, Dict

from .errors import InputError


def julian_day(year: int, month: int, day: float, hour: float = 0.0) -> float:
    if month <= 2:
        year -= 1
        month += 12

    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)

    return (
        math.floor(365.25 * (year + 4716))
        + math.floor(30.6001 * (month + 1))
        + day + hour / 24.0 + b - 1524.5
    )


def time_to_decimal(hours: float, minutes: float = 0, seconds: float = 0) -> float:
    return hours + minutes / 60.0 + seconds / 3600.0


def days_in_month(year: int, month: int) -> int:
    try:
        return calendar.monthrange(year, month)[1]
    except calendar.IllegalMonthError as e:
        raise InputError(f"Invalid month {month} for year {year}") from e


@dataclass(frozen=True)
class UtcMoment:
    year: int
    month: int
    day: int
    hour: float

    @property
    def jd(self) -> float:
        return julian_day(self.year, self.month, self.day, self.hour)

    def to_json(self) -> Dict[str, Any]:
        d = asdict(self)
        d["jd"] = self.jd
        return d


def local_to_utc(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    tz_offset: float = 0.0,
) -> UtcMoment:
    utc_hour = time_to_decimal(hour, minute) - (tz_offset or 0.0)

    if utc_hour < 0:
        day -= 1
        if day < 1:
            month -= 1
            if month < 1:
                month = 12
                year -= 1
            day = days_in_month(year, month)
    elif utc_hour >= 24:
        day += 1
        if day > days_in_month(year, month):
            day = 1
            month += 1
            if month > 12:
                month = 1
                year += 1

    return UtcMoment(year=year, month=month, day=day, hour=utc_hour % 24.0)


def validate_civil_date(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> None:
    """Boundary check for caller-supplied civil dates."""
    if not 1 <= month <= 12:
        raise InputError(f"month must be 1-12, got {month}")
    last = days_in_month(year, month)
    if not 1 <= day <= last:
        raise InputError(f"day must be 1-{last} for {year}-{month:02d}, got {day}")
    if not 0 <= hour <= 23:
        raise InputError(f"hour must be 0-23, got {hour}")
    if not 0 <= minute <= 59:
        raise InputError(f"minute must be 0-59, got {minute}")

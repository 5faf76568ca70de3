"""DayCount - Conventions converting a pair of dates to a year fraction.

Used by surface metadata when an axis measures elapsed time.
"""

from __future__ import annotations

import calendar
from datetime import date
from enum import Enum

from src.core.domain.validation import InvalidArgumentError, require_not_blank


class DayCount(Enum):
    """Day count convention, keyed by its market name."""

    ACT_360 = "Act/360"
    ACT_365F = "Act/365F"
    ACT_ACT_ISDA = "Act/Act ISDA"
    THIRTY_360_ISDA = "30/360 ISDA"
    ONE_ONE = "1/1"

    @classmethod
    def of(cls, name: str) -> "DayCount":
        """Look up a convention by market name or enum name (case-insensitive).

        Raises:
            InvalidArgumentError: If the name is unknown
        """
        require_not_blank(name, "name")
        key = name.strip().upper()
        for day_count in cls:
            if key in (day_count.value.upper(), day_count.name):
                return day_count
        raise InvalidArgumentError(f"Unknown day count: '{name}'")

    def year_fraction(self, start: date, end: date) -> float:
        """Return the year fraction between two dates.

        The result is negative when end is before start.
        """
        if end < start:
            return -self.year_fraction(end, start)

        if self is DayCount.ACT_360:
            return (end - start).days / 360.0
        if self is DayCount.ACT_365F:
            return (end - start).days / 365.0
        if self is DayCount.ACT_ACT_ISDA:
            return _act_act_isda(start, end)
        if self is DayCount.THIRTY_360_ISDA:
            return _thirty_360_isda(start, end)
        return 1.0

    def __str__(self) -> str:
        return self.value


def _act_act_isda(start: date, end: date) -> float:
    if start.year == end.year:
        return (end - start).days / _days_in_year(start.year)
    # Stub to the first year end, whole years, then the final stub
    first = (date(start.year + 1, 1, 1) - start).days / _days_in_year(start.year)
    last = (end - date(end.year, 1, 1)).days / _days_in_year(end.year)
    return first + (end.year - start.year - 1) + last


def _thirty_360_isda(start: date, end: date) -> float:
    d1 = min(start.day, 30)
    d2 = end.day
    if d2 == 31 and d1 == 30:
        d2 = 30
    days = (end.year - start.year) * 360 + (end.month - start.month) * 30 + (d2 - d1)
    return days / 360.0


def _days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365

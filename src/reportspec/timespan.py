# -------------------------------------
# time frequencies and spans
# -------------------------------------
"""
Calendar periods used by the calculation engine.

A TimeSpan is an inclusive [start, end] range of days covering one period of
a TimeFrequency: a day, an ISO week (Monday to Sunday), a month, a quarter or
a year.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
import re


class TimeFrequency(Enum):
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    YEARLY = "Yearly"

    def __str__(self) -> str:
        return self.value

    @property
    def noun(self) -> str:
        """Singular period noun used in prose ("week", "quarter", ...)."""
        return _NOUNS[self]


_NOUNS = {
    TimeFrequency.DAILY: "day",
    TimeFrequency.WEEKLY: "week",
    TimeFrequency.MONTHLY: "month",
    TimeFrequency.QUARTERLY: "quarter",
    TimeFrequency.YEARLY: "year",
}

_BY_NAME = {f.value.lower(): f for f in TimeFrequency}

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_frequency(s: str) -> TimeFrequency:
    """Parse a frequency name (case-insensitive). Raises ValueError."""
    try:
        return _BY_NAME[s.strip().lower()]
    except KeyError:
        raise ValueError(f"not a time frequency: {s!r}") from None


def parse_date(s: str) -> date:
    """Parse a YYYY-MM-DD date literal. Raises ValueError."""
    t = s.strip()
    if not _DATE_RE.match(t):
        raise ValueError(f"not a date literal: {s!r}")
    return datetime.strptime(t, "%Y-%m-%d").date()


def _month_bounds(year: int, month: int) -> tuple[date, date]:
    first_day = date(year, month, 1)
    if month == 12:
        next_first = date(year + 1, 1, 1)
    else:
        next_first = date(year, month + 1, 1)
    return first_day, next_first - timedelta(days=1)


@dataclass(frozen=True)
class TimeSpan:
    start: date
    end: date
    frequency: TimeFrequency

    @classmethod
    def containing(cls, d: date, frequency: TimeFrequency) -> "TimeSpan":
        if frequency is TimeFrequency.DAILY:
            return cls(d, d, frequency)
        if frequency is TimeFrequency.WEEKLY:
            start = d - timedelta(days=d.weekday())
            return cls(start, start + timedelta(days=6), frequency)
        if frequency is TimeFrequency.MONTHLY:
            start, end = _month_bounds(d.year, d.month)
            return cls(start, end, frequency)
        if frequency is TimeFrequency.QUARTERLY:
            first_month = 3 * ((d.month - 1) // 3) + 1
            start, _ = _month_bounds(d.year, first_month)
            _, end = _month_bounds(d.year, first_month + 2)
            return cls(start, end, frequency)
        if frequency is TimeFrequency.YEARLY:
            return cls(date(d.year, 1, 1), date(d.year, 12, 31), frequency)
        raise TypeError(f"unsupported frequency: {frequency!r}")

    def prev(self) -> "TimeSpan":
        """The span of the same frequency immediately before this one."""
        return TimeSpan.containing(self.start - timedelta(days=1), self.frequency)

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end

    def __str__(self) -> str:
        return f"{self.start:%Y-%m-%d}..{self.end:%Y-%m-%d}"

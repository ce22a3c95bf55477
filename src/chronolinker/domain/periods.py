"""Period arithmetic — previous/next, parent boundary, child range.

Pure functions over :class:`datetime.date`. No I/O. Unknown granularities
never raise: stepping returns the input unchanged and :func:`child_range`
returns None, which callers treat as "not an aggregation root".
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta

from chronolinker.domain.dateformat import format_pattern, parse_pattern
from chronolinker.domain.types import Granularity

# Month-based granularities and their width in months.
_MONTH_STEPS: dict[Granularity, int] = {
    Granularity.MONTH: 1,
    Granularity.QUARTER: 3,
    Granularity.HALF_YEAR: 6,
    Granularity.YEAR: 12,
}


@dataclass(frozen=True)
class DateRange:
    """Inclusive span of dates covered by one parent period."""

    start: date
    end: date

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, date):
            return False
        return self.start <= value <= self.end


def _coerce(granularity: Granularity | str) -> Granularity | None:
    try:
        return Granularity(granularity)
    except ValueError:
        return None


def add_months(value: date, months: int) -> date:
    """Shift *value* by *months*, clamping the day to the target month's end."""
    year, month0 = divmod(value.month - 1 + months, 12)
    year += value.year
    last_day = calendar.monthrange(year, month0 + 1)[1]
    return date(year, month0 + 1, min(value.day, last_day))


def parse_date(basename: str, fmt: str) -> date | None:
    """Parse a document basename into its period, or None if it does not match."""
    return parse_pattern(basename, fmt)


def format_date(period: date, fmt: str) -> str:
    """Format *period* as a document basename."""
    return format_pattern(period, fmt)


def _step(period: date, granularity: Granularity | str, direction: int) -> date:
    unit = _coerce(granularity)
    if unit is Granularity.DAY:
        return period + timedelta(days=direction)
    if unit is Granularity.WEEK:
        return period + timedelta(weeks=direction)
    if unit in _MONTH_STEPS:
        return add_months(period, direction * _MONTH_STEPS[unit])
    return period


def previous_period(period: date, granularity: Granularity | str) -> date:
    """One unit of *granularity* before *period*."""
    return _step(period, granularity, -1)


def next_period(period: date, granularity: Granularity | str) -> date:
    """One unit of *granularity* after *period*."""
    return _step(period, granularity, 1)


def _bucket_start(period: date, months_per_unit: int) -> date:
    month0 = (period.month - 1) // months_per_unit * months_per_unit
    return date(period.year, month0 + 1, 1)


def parent_boundary(period: date, parent: Granularity | str) -> date:
    """Start of the *parent* period enclosing *period*.

    Weeks start on Monday. Quarter and half-year buckets are computed as
    ``floor(month0 / n) * n`` so March 31 lands in Q1, not Q2.
    """
    unit = _coerce(parent)
    if unit is Granularity.WEEK:
        return period - timedelta(days=period.weekday())
    if unit in _MONTH_STEPS:
        return _bucket_start(period, _MONTH_STEPS[unit])
    return period


def child_range(parent_period: date, parent: Granularity | str) -> DateRange | None:
    """Inclusive date range spanned by the *parent* period containing *parent_period*."""
    unit = _coerce(parent)
    if unit is Granularity.WEEK:
        start = parent_boundary(parent_period, unit)
        return DateRange(start=start, end=start + timedelta(days=6))
    if unit in _MONTH_STEPS:
        start = parent_boundary(parent_period, unit)
        end = add_months(start, _MONTH_STEPS[unit]) - timedelta(days=1)
        return DateRange(start=start, end=end)
    return None

"""
Report periods.

A period is one of three value types:

    MonthlyPeriod(year, month)       # month 1..12
    QuarterlyPeriod(year, quarter)   # quarter 1..4
    CustomPeriod(start, end)         # two calendar dates, inclusive

``date_range(period)`` turns it into a DateRange whose ``start`` is the
first instant of the first day and whose ``end`` is the last instant
(23:59:59.999) of the last day. All arithmetic is on the civil calendar
(the project runs with USE_TZ = False), so no timezone shifts apply.
"""

import calendar
import datetime
from dataclasses import dataclass
from typing import Mapping, Optional, Union

from django.core.exceptions import ValidationError
from django.utils.dateparse import parse_date

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

MONTHLY = "monthly"
QUARTERLY = "quarterly"
CUSTOM = "custom"

# Last representable instant of a day, at millisecond precision
END_OF_DAY = datetime.time(23, 59, 59, 999000)


@dataclass(frozen=True)
class DateRange:
    start: datetime.datetime
    end: datetime.datetime


@dataclass(frozen=True)
class MonthlyPeriod:
    year: int
    month: int

    view = MONTHLY

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {self.month}.")
        _check_year(self.year)


@dataclass(frozen=True)
class QuarterlyPeriod:
    year: int
    quarter: int

    view = QUARTERLY

    def __post_init__(self):
        if not 1 <= self.quarter <= 4:
            raise ValidationError(f"Quarter must be between 1 and 4, got {self.quarter}.")
        _check_year(self.year)

    @property
    def first_month(self) -> int:
        return (self.quarter - 1) * 3 + 1

    @property
    def last_month(self) -> int:
        return self.quarter * 3


@dataclass(frozen=True)
class CustomPeriod:
    start: datetime.date
    end: datetime.date

    view = CUSTOM

    def __post_init__(self):
        if self.start > self.end:
            raise ValidationError("Custom period start must not be after its end.")


Period = Union[MonthlyPeriod, QuarterlyPeriod, CustomPeriod]


def _check_year(year):
    if not datetime.MINYEAR <= year <= datetime.MAXYEAR:
        raise ValidationError(f"Year out of range: {year}")


def _day_span(first_day: datetime.date, last_day: datetime.date) -> DateRange:
    return DateRange(
        start=datetime.datetime.combine(first_day, datetime.time.min),
        end=datetime.datetime.combine(last_day, END_OF_DAY),
    )


def _month_end(year, month) -> datetime.date:
    return datetime.date(year, month, calendar.monthrange(year, month)[1])


def date_range(period: Period) -> DateRange:
    """Concrete, inclusive [start, end] instants covered by ``period``."""
    if isinstance(period, MonthlyPeriod):
        return _day_span(
            datetime.date(period.year, period.month, 1),
            _month_end(period.year, period.month),
        )
    if isinstance(period, QuarterlyPeriod):
        return _day_span(
            datetime.date(period.year, period.first_month, 1),
            _month_end(period.year, period.last_month),
        )
    if isinstance(period, CustomPeriod):
        return _day_span(period.start, period.end)
    raise ValidationError(f"Unsupported period: {period!r}")


def next_period(period: Period) -> Period:
    if isinstance(period, MonthlyPeriod):
        if period.month == 12:
            return MonthlyPeriod(period.year + 1, 1)
        return MonthlyPeriod(period.year, period.month + 1)
    if isinstance(period, QuarterlyPeriod):
        if period.quarter == 4:
            return QuarterlyPeriod(period.year + 1, 1)
        return QuarterlyPeriod(period.year, period.quarter + 1)
    # a custom window has no natural successor
    return period


def previous_period(period: Period) -> Period:
    if isinstance(period, MonthlyPeriod):
        if period.month == 1:
            return MonthlyPeriod(period.year - 1, 12)
        return MonthlyPeriod(period.year, period.month - 1)
    if isinstance(period, QuarterlyPeriod):
        if period.quarter == 1:
            return QuarterlyPeriod(period.year - 1, 4)
        return QuarterlyPeriod(period.year, period.quarter - 1)
    return period


def period_label(period: Period) -> str:
    """ "November 2025", "2025 Q3", "2025-01-01 – 2025-01-31" """
    if isinstance(period, MonthlyPeriod):
        return f"{MONTH_NAMES[period.month - 1]} {period.year}"
    if isinstance(period, QuarterlyPeriod):
        return f"{period.year} Q{period.quarter}"
    if isinstance(period, CustomPeriod):
        return f"{period.start.isoformat()} – {period.end.isoformat()}"
    raise ValidationError(f"Unsupported period: {period!r}")


def current_month_period(today: Optional[datetime.date] = None) -> MonthlyPeriod:
    today = today or datetime.date.today()
    return MonthlyPeriod(today.year, today.month)


# ----------------------------
# Query-string round trip
# ----------------------------
def _int_or_none(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_period(params: Mapping, today: Optional[datetime.date] = None) -> Period:
    """
    Read a period from query parameters (view, year, month, quarter,
    from, to). Anything missing or invalid falls back to the current
    month, the way the finance page behaves on a bare URL.
    """
    view = params.get("view")
    try:
        if view == MONTHLY:
            year, month = _int_or_none(params.get("year")), _int_or_none(params.get("month"))
            if year and month:
                return MonthlyPeriod(year, month)
        elif view == QUARTERLY:
            year, quarter = _int_or_none(params.get("year")), _int_or_none(params.get("quarter"))
            if year and quarter:
                return QuarterlyPeriod(year, quarter)
        elif view == CUSTOM:
            start, end = parse_date(params.get("from") or ""), parse_date(params.get("to") or "")
            if start and end:
                return CustomPeriod(start, end)
    except (ValidationError, ValueError):
        pass
    return current_month_period(today)


def period_to_query(period: Period) -> dict:
    if isinstance(period, MonthlyPeriod):
        return {"view": MONTHLY, "year": str(period.year), "month": str(period.month)}
    if isinstance(period, QuarterlyPeriod):
        return {"view": QUARTERLY, "year": str(period.year), "quarter": str(period.quarter)}
    if isinstance(period, CustomPeriod):
        return {"view": CUSTOM, "from": period.start.isoformat(), "to": period.end.isoformat()}
    raise ValidationError(f"Unsupported period: {period!r}")

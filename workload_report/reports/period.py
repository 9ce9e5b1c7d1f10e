"""Report periods.

A period is always resolved to concrete inclusive dates before the engine
runs. Relative period types are resolved against an explicit ``today``.
"""

from __future__ import annotations

import calendar
import datetime as dt
from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator

from workload_report.reports.errors import InvalidPeriodError

PeriodType = Literal["weekly", "monthly", "quarterly", "semi_annual", "annual", "custom"]

_MONTH_OFFSETS: dict[str, int] = {
    "monthly": 1,
    "quarterly": 3,
    "semi_annual": 6,
    "annual": 12,
}

_PERIOD_LABELS: dict[str, str] = {
    "weekly": "Past week",
    "monthly": "Past month",
    "quarterly": "Past 3 months",
    "semi_annual": "Past 6 months",
    "annual": "Past year",
}


class ReportPeriod(BaseModel):
    """Inclusive reporting window."""

    model_config = ConfigDict(frozen=True)

    start: dt.date
    end: dt.date
    type: PeriodType = "custom"

    @model_validator(mode="after")
    def _check_order(self) -> ReportPeriod:
        if self.start > self.end:
            raise ValueError(f"Period start {self.start} is after end {self.end}")
        return self

    def contains(self, day: dt.date) -> bool:
        return self.start <= day <= self.end


def _subtract_months(day: dt.date, months: int) -> dt.date:
    """Shift a date back by whole calendar months, clamping the day to the target month length."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return dt.date(year, month, min(day.day, last_day))


def resolve_period(
    period_type: PeriodType,
    today: dt.date,
    custom_start: dt.date | None = None,
    custom_end: dt.date | None = None,
) -> ReportPeriod:
    """Resolve a period type into concrete inclusive dates.

    Args:
        period_type: weekly, monthly, quarterly, semi_annual, annual or custom
        today: Reference date; becomes the period end for relative types
        custom_start: Start date, required for custom periods
        custom_end: End date, required for custom periods

    Returns:
        Resolved ReportPeriod

    Raises:
        InvalidPeriodError: Unknown type, missing custom bounds, or start after end
    """
    if period_type == "custom":
        if custom_start is None or custom_end is None:
            raise InvalidPeriodError("Custom periods require both start and end dates")
        if custom_start > custom_end:
            raise InvalidPeriodError(f"Period start {custom_start} is after end {custom_end}")
        return ReportPeriod(start=custom_start, end=custom_end, type="custom")

    if period_type == "weekly":
        start = today - dt.timedelta(days=7)
    elif period_type in _MONTH_OFFSETS:
        start = _subtract_months(today, _MONTH_OFFSETS[period_type])
    else:
        raise InvalidPeriodError(f"Unknown period type: {period_type}")

    return ReportPeriod(start=start, end=today, type=period_type)


def period_label(period: ReportPeriod) -> str:
    """Human-readable label for a period."""
    if period.type == "custom":
        return f"{period.start.isoformat()} ~ {period.end.isoformat()}"
    return _PERIOD_LABELS.get(period.type, "Unknown period")

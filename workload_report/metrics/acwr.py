"""Acute:Chronic Workload Ratio (ACWR) computation.

Metrics:
- Acute load: sum of session-RPE load over the trailing 7 days
- Chronic load: sum of load over the trailing 28 days divided by 4 (weekly average)
- ACWR: acute / chronic

Properties:
- Deterministic: Same input always produces same output
- Stateless: Recomputed from stored history on every call
- Missing days are rest days (load 0), not gaps
- Days without a full 28-day window or with zero chronic load are omitted
"""

from __future__ import annotations

import datetime as dt
from collections import defaultdict
from collections.abc import Iterable
from statistics import mean

from pydantic import BaseModel, ConfigDict

from workload_report.analysis.risk import RiskClassifier
from workload_report.analysis.trends import classify_trend
from workload_report.reports.models import AcwrSummary
from workload_report.reports.records import TrainingSession

ACUTE_WINDOW_DAYS = 7
CHRONIC_WINDOW_DAYS = 28
CHRONIC_WEEKS = CHRONIC_WINDOW_DAYS // ACUTE_WINDOW_DAYS


class WorkloadPoint(BaseModel):
    """ACWR value for a single calendar day."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    acute_load: float
    chronic_load: float
    acwr: float


class WorkloadSeriesCalculator:
    """Builds a daily ACWR series from an athlete's training sessions.

    The caller supplies sessions reaching back at least CHRONIC_WINDOW_DAYS - 1
    days before the first date of interest; earlier sessions only fill windows.
    """

    def __init__(self, risk_classifier: RiskClassifier | None = None) -> None:
        self.risk_classifier = risk_classifier or RiskClassifier()

    @staticmethod
    def history_start(period_start: dt.date) -> dt.date:
        """First date of load history needed to fill the chronic window on period_start."""
        return period_start - dt.timedelta(days=CHRONIC_WINDOW_DAYS - 1)

    def calculate(
        self,
        sessions: Iterable[TrainingSession],
        start: dt.date | None = None,
        end: dt.date | None = None,
    ) -> list[WorkloadPoint]:
        """Calculate the ACWR series.

        Args:
            sessions: Training sessions in any order; multiple sessions per day are summed
            start: Optional first date to emit (history before it is still used)
            end: Optional last date to emit

        Returns:
            Chronological list of WorkloadPoint, one per calendar day with a full
            chronic window and chronic load > 0
        """
        daily: dict[dt.date, float] = defaultdict(float)
        for session in sessions:
            daily[session.date] += session.load

        if not daily:
            return []

        first_day = min(daily)
        last_day = max(daily)

        # Continuous series, rest days filled with 0.0
        days: list[dt.date] = []
        loads: list[float] = []
        current = first_day
        while current <= last_day:
            days.append(current)
            loads.append(daily.get(current, 0.0))
            current += dt.timedelta(days=1)

        points: list[WorkloadPoint] = []
        for i in range(CHRONIC_WINDOW_DAYS - 1, len(days)):
            day = days[i]
            if start is not None and day < start:
                continue
            if end is not None and day > end:
                break

            acute = sum(loads[i - ACUTE_WINDOW_DAYS + 1 : i + 1])
            chronic = sum(loads[i - CHRONIC_WINDOW_DAYS + 1 : i + 1]) / CHRONIC_WEEKS

            if chronic <= 0:
                continue

            points.append(
                WorkloadPoint(
                    date=day,
                    acute_load=round(acute, 1),
                    chronic_load=round(chronic, 1),
                    acwr=round(acute / chronic, 2),
                )
            )

        return points

    def summarize(self, series: list[WorkloadPoint]) -> AcwrSummary:
        """Reduce an ACWR series to current/average/extrema, risk and trend.

        An empty series yields current=0, which classifies as high risk.
        """
        values = [p.acwr for p in series]
        current = values[-1] if values else 0.0

        return AcwrSummary(
            current=current,
            average=mean(values) if values else 0.0,
            max=max(values) if values else 0.0,
            min=min(values) if values else 0.0,
            risk_level=self.risk_classifier.classify(current),
            days_in_danger_zone=self.risk_classifier.days_in_danger_zone(values),
            trend=classify_trend(values),
        )

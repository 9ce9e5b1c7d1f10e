"""Per-domain summarizers.

Each aggregator reduces the period-restricted records of one domain to a small
summary. Empty inputs degrade to None / "no_data" / 0, never raise.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Sequence
from statistics import mean

from workload_report.analysis.trends import classify_trend
from workload_report.reports.models import (
    AlertSummary,
    MotivationSummary,
    PerformanceSummary,
    SleepSummary,
    TrainingSummary,
    WeightSummary,
    WeightTrend,
)
from workload_report.reports.records import (
    AlertEntry,
    MotivationEntry,
    PerformanceEntry,
    SleepEntry,
    TrainingSession,
    WeightEntry,
)

# Weight changes smaller than this (kg) count as stable
WEIGHT_STABLE_THRESHOLD_KG = 0.5

PersonalBestRule = Callable[[list[PerformanceEntry]], int]


def _mean_or_none(values: Sequence[float]) -> float | None:
    return mean(values) if values else None


class TrainingLoadAggregator:
    def aggregate(self, sessions: Sequence[TrainingSession]) -> TrainingSummary:
        total_sessions = len(sessions)
        if total_sessions == 0:
            return TrainingSummary()

        total_load = sum(s.load for s in sessions)
        return TrainingSummary(
            total_sessions=total_sessions,
            total_load=total_load,
            average_load=total_load / total_sessions,
            max_load=max(s.load for s in sessions),
            average_rpe=sum(s.rpe for s in sessions) / total_sessions,
            total_duration=sum(s.duration_min for s in sessions),
        )


class WeightAggregator:
    """Current/average weight and the change between first and last record.

    change is None with fewer than two records; change_percent is also None
    when the first weight is 0.
    """

    def aggregate(self, records: Sequence[WeightEntry]) -> WeightSummary:
        weights = [r.weight_kg for r in sorted(records, key=lambda r: r.date)]
        if not weights:
            return WeightSummary()

        first = weights[0]
        current = weights[-1]

        change: float | None = None
        change_percent: float | None = None
        if len(weights) >= 2:
            change = current - first
            if first != 0:
                change_percent = change / first * 100

        return WeightSummary(
            current=current,
            average=mean(weights),
            change=change,
            change_percent=change_percent,
            trend=self._trend(change),
        )

    @staticmethod
    def _trend(change: float | None) -> WeightTrend:
        if change is None:
            return "no_data"
        if abs(change) < WEIGHT_STABLE_THRESHOLD_KG:
            return "stable"
        return "increasing" if change > 0 else "decreasing"


class SleepAggregator:
    def aggregate(self, records: Sequence[SleepEntry]) -> SleepSummary:
        ordered = sorted(records, key=lambda r: r.date)
        qualities = [r.sleep_quality for r in ordered if r.sleep_quality is not None]

        return SleepSummary(
            average_hours=_mean_or_none([r.sleep_hours for r in ordered]),
            average_quality=_mean_or_none(qualities),
            total_records=len(ordered),
            quality_trend=classify_trend(qualities),
        )


class MotivationAggregator:
    def aggregate(self, records: Sequence[MotivationEntry]) -> MotivationSummary:
        ordered = sorted(records, key=lambda r: r.date)
        motivations = [r.motivation_level for r in ordered if r.motivation_level is not None]
        energies = [r.energy_level for r in ordered if r.energy_level is not None]
        stresses = [r.stress_level for r in ordered if r.stress_level is not None]

        return MotivationSummary(
            average_motivation=_mean_or_none(motivations),
            average_energy=_mean_or_none(energies),
            average_stress=_mean_or_none(stresses),
            total_records=len(ordered),
            motivation_trend=classify_trend(motivations),
        )


class PerformanceAggregator:
    """Counts tests and first-vs-last changes per test type.

    A result only counts when both the first and last value are present and
    non-zero. Personal bests stay 0 unless a personal_best_rule is supplied;
    the rule is applied to each test type's date-ordered records and summed.
    """

    def __init__(self, personal_best_rule: PersonalBestRule | None = None) -> None:
        self.personal_best_rule = personal_best_rule

    def aggregate(self, records: Sequence[PerformanceEntry]) -> PerformanceSummary:
        by_type: dict[str, list[PerformanceEntry]] = defaultdict(list)
        for record in records:
            by_type[record.test_type_id].append(record)

        improvements = 0
        declines = 0
        personal_bests = 0

        for test_type_id in sorted(by_type):
            group = sorted(by_type[test_type_id], key=lambda r: r.date)

            if self.personal_best_rule is not None:
                personal_bests += self.personal_best_rule(group)

            if len(group) < 2:
                continue

            first_value = group[0].result
            last_value = group[-1].result
            if not first_value or not last_value:
                continue

            if last_value > first_value:
                improvements += 1
            elif last_value < first_value:
                declines += 1

        return PerformanceSummary(
            total_tests=len(records),
            personal_bests=personal_bests,
            improvements=improvements,
            declines=declines,
        )


class AlertAggregator:
    def aggregate(self, alerts: Sequence[AlertEntry]) -> AlertSummary:
        return AlertSummary(
            total=len(alerts),
            high=sum(1 for a in alerts if a.priority == "high"),
            medium=sum(1 for a in alerts if a.priority == "medium"),
            low=sum(1 for a in alerts if a.priority == "low"),
            resolved=sum(1 for a in alerts if a.is_resolved),
        )

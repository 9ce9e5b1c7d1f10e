"""Report artifacts produced by the engine.

All models are frozen: a report is built once per call and never mutated.
"""

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from workload_report.analysis.risk import RiskLevel
from workload_report.analysis.trends import TrendLabel
from workload_report.reports.period import ReportPeriod

WeightTrend = Literal["increasing", "stable", "decreasing", "no_data"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class TrainingSummary(_Frozen):
    total_sessions: int = 0
    total_load: float = 0.0
    average_load: float = 0.0
    max_load: float = 0.0
    average_rpe: float = 0.0
    total_duration: float = 0.0


class AcwrSummary(_Frozen):
    current: float = 0.0
    average: float = 0.0
    max: float = 0.0
    min: float = 0.0
    risk_level: RiskLevel
    days_in_danger_zone: int = 0
    trend: TrendLabel = "no_data"


class WeightSummary(_Frozen):
    current: float | None = None
    average: float | None = None
    change: float | None = None
    change_percent: float | None = None
    trend: WeightTrend = "no_data"


class SleepSummary(_Frozen):
    average_hours: float | None = None
    average_quality: float | None = None
    total_records: int = 0
    quality_trend: TrendLabel = "no_data"


class MotivationSummary(_Frozen):
    average_motivation: float | None = None
    average_energy: float | None = None
    average_stress: float | None = None
    total_records: int = 0
    motivation_trend: TrendLabel = "no_data"


class PerformanceSummary(_Frozen):
    total_tests: int = 0
    personal_bests: int = 0
    improvements: int = 0
    declines: int = 0


class AlertSummary(_Frozen):
    total: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    resolved: int = 0


class AthleteReportData(_Frozen):
    """Per-athlete, per-period report."""

    athlete_id: str
    athlete_name: str
    athlete_email: str | None = None
    training_records: TrainingSummary
    acwr_data: AcwrSummary
    weight_data: WeightSummary
    sleep_data: SleepSummary
    motivation_data: MotivationSummary
    performance_data: PerformanceSummary
    alerts: AlertSummary


class AthleteReportFailure(_Frozen):
    """An athlete excluded from a team report because their build raised."""

    athlete_id: str
    athlete_name: str | None = None
    error_type: str
    message: str


class TeamReportSummary(_Frozen):
    """Team-level report. generated_at is the only wall-clock dependent field."""

    team_id: str
    team_name: str
    period: ReportPeriod
    generated_at: dt.datetime

    total_athletes: int = 0
    active_athletes: int = 0

    team_average_load: float = 0.0
    team_average_acwr: float = 0.0

    high_risk_count: int = 0
    medium_risk_count: int = 0
    low_risk_count: int = 0

    total_alerts: int = 0
    new_alerts: int = 0
    critical_alerts: int = 0

    athletes: list[AthleteReportData] = Field(default_factory=list)
    insights: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    failures: list[AthleteReportFailure] = Field(default_factory=list)

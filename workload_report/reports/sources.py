"""Read-only data-source contract for the reporting engine.

The engine never writes through this interface. Date bounds are inclusive.
"""

from __future__ import annotations

import datetime as dt
from typing import Protocol

from workload_report.reports.records import (
    AlertEntry,
    AthleteProfile,
    MotivationEntry,
    PerformanceEntry,
    SleepEntry,
    TeamInfo,
    TrainingSession,
    WeightEntry,
)


class ReportDataSource(Protocol):
    """Record store interface.

    Implementations may be backed by SQL, an HTTP API, or in-memory fixtures.
    Lookups return None for missing entities; list methods return [] when a
    domain has no records.
    """

    def get_team(self, team_id: str) -> TeamInfo | None: ...

    def list_team_athletes(self, team_id: str) -> list[AthleteProfile]: ...

    def get_athlete(self, athlete_id: str) -> AthleteProfile | None: ...

    def list_training_sessions(self, athlete_id: str, start: dt.date, end: dt.date) -> list[TrainingSession]: ...

    def list_weight_records(self, athlete_id: str, start: dt.date, end: dt.date) -> list[WeightEntry]: ...

    def list_sleep_records(self, athlete_id: str, start: dt.date, end: dt.date) -> list[SleepEntry]: ...

    def list_motivation_records(self, athlete_id: str, start: dt.date, end: dt.date) -> list[MotivationEntry]: ...

    def list_performance_records(self, athlete_id: str, start: dt.date, end: dt.date) -> list[PerformanceEntry]: ...

    def list_alerts(self, athlete_id: str, start: dt.date, end: dt.date) -> list[AlertEntry]: ...

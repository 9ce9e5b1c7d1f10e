"""SQLAlchemy implementation of the report data source.

Each call opens its own session so the source can be shared by concurrent
athlete builds. All queries are read-only.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from workload_report.db.models import (
    Alert,
    MotivationRecord,
    PerformanceRecord,
    SleepRecord,
    Team,
    TrainingRecord,
    User,
    WeightRecord,
)
from workload_report.db.session import get_session
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

SessionFactory = Callable[[], AbstractContextManager[Session]]


def _result_value(values: dict[str, Any] | None) -> float | None:
    """Extract the numeric headline result from a performance payload."""
    if not values:
        return None
    raw = values.get("result")
    if isinstance(raw, bool) or raw is None:
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


def _day_bounds(start: dt.date, end: dt.date) -> tuple[dt.datetime, dt.datetime]:
    """Half-open datetime range covering the inclusive date range."""
    return (
        dt.datetime.combine(start, dt.time.min),
        dt.datetime.combine(end + dt.timedelta(days=1), dt.time.min),
    )


class SqlReportDataSource:
    """Reads teams, rosters and athlete records from the relational store."""

    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session_factory = session_factory or get_session

    def get_team(self, team_id: str) -> TeamInfo | None:
        with self._session_factory() as session:
            team = session.get(Team, team_id)
            if team is None:
                return None
            return TeamInfo(id=team.id, name=team.name)

    def list_team_athletes(self, team_id: str) -> list[AthleteProfile]:
        with self._session_factory() as session:
            users = (
                session.execute(
                    select(User).where(User.team_id == team_id, User.role == "athlete").order_by(User.id)
                )
                .scalars()
                .all()
            )
            return [AthleteProfile(id=u.id, name=u.name, email=u.email, team_id=u.team_id) for u in users]

    def get_athlete(self, athlete_id: str) -> AthleteProfile | None:
        with self._session_factory() as session:
            user = session.get(User, athlete_id)
            if user is None:
                return None
            return AthleteProfile(id=user.id, name=user.name, email=user.email, team_id=user.team_id)

    def list_training_sessions(self, athlete_id: str, start: dt.date, end: dt.date) -> list[TrainingSession]:
        with self._session_factory() as session:
            rows = (
                session.execute(
                    select(TrainingRecord)
                    .where(
                        TrainingRecord.user_id == athlete_id,
                        TrainingRecord.date >= start,
                        TrainingRecord.date <= end,
                    )
                    .order_by(TrainingRecord.date, TrainingRecord.id)
                )
                .scalars()
                .all()
            )
            return [
                TrainingSession(
                    athlete_id=r.user_id,
                    date=r.date,
                    rpe=r.rpe,
                    duration_min=r.duration_min,
                    load=r.load,
                )
                for r in rows
            ]

    def list_weight_records(self, athlete_id: str, start: dt.date, end: dt.date) -> list[WeightEntry]:
        with self._session_factory() as session:
            rows = (
                session.execute(
                    select(WeightRecord)
                    .where(
                        WeightRecord.user_id == athlete_id,
                        WeightRecord.date >= start,
                        WeightRecord.date <= end,
                    )
                    .order_by(WeightRecord.date, WeightRecord.id)
                )
                .scalars()
                .all()
            )
            return [WeightEntry(athlete_id=r.user_id, date=r.date, weight_kg=r.weight_kg) for r in rows]

    def list_sleep_records(self, athlete_id: str, start: dt.date, end: dt.date) -> list[SleepEntry]:
        with self._session_factory() as session:
            rows = (
                session.execute(
                    select(SleepRecord)
                    .where(
                        SleepRecord.user_id == athlete_id,
                        SleepRecord.date >= start,
                        SleepRecord.date <= end,
                    )
                    .order_by(SleepRecord.date, SleepRecord.id)
                )
                .scalars()
                .all()
            )
            return [
                SleepEntry(
                    athlete_id=r.user_id,
                    date=r.date,
                    sleep_hours=r.sleep_hours,
                    sleep_quality=r.sleep_quality,
                )
                for r in rows
            ]

    def list_motivation_records(self, athlete_id: str, start: dt.date, end: dt.date) -> list[MotivationEntry]:
        with self._session_factory() as session:
            rows = (
                session.execute(
                    select(MotivationRecord)
                    .where(
                        MotivationRecord.user_id == athlete_id,
                        MotivationRecord.date >= start,
                        MotivationRecord.date <= end,
                    )
                    .order_by(MotivationRecord.date, MotivationRecord.id)
                )
                .scalars()
                .all()
            )
            return [
                MotivationEntry(
                    athlete_id=r.user_id,
                    date=r.date,
                    motivation_level=r.motivation_level,
                    energy_level=r.energy_level,
                    stress_level=r.stress_level,
                )
                for r in rows
            ]

    def list_performance_records(self, athlete_id: str, start: dt.date, end: dt.date) -> list[PerformanceEntry]:
        with self._session_factory() as session:
            rows = (
                session.execute(
                    select(PerformanceRecord)
                    .where(
                        PerformanceRecord.user_id == athlete_id,
                        PerformanceRecord.date >= start,
                        PerformanceRecord.date <= end,
                    )
                    .order_by(PerformanceRecord.date, PerformanceRecord.id)
                )
                .scalars()
                .all()
            )
            return [
                PerformanceEntry(
                    athlete_id=r.user_id,
                    date=r.date,
                    test_type_id=r.test_type_id,
                    result=_result_value(r.values),
                )
                for r in rows
            ]

    def list_alerts(self, athlete_id: str, start: dt.date, end: dt.date) -> list[AlertEntry]:
        range_start, range_end = _day_bounds(start, end)
        with self._session_factory() as session:
            rows = (
                session.execute(
                    select(Alert)
                    .where(
                        Alert.user_id == athlete_id,
                        Alert.created_at >= range_start,
                        Alert.created_at < range_end,
                    )
                    .order_by(Alert.created_at, Alert.id)
                )
                .scalars()
                .all()
            )
            return [
                AlertEntry(
                    athlete_id=r.user_id,
                    created_at=r.created_at,
                    priority=r.priority,
                    is_resolved=r.is_resolved,
                )
                for r in rows
            ]

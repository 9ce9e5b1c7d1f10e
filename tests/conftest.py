"""Root conftest for all tests.

Provides an in-memory report data source for engine tests and a file-backed
SQLite database for repository, service, API and CLI tests.
"""

import datetime as dt
from collections import defaultdict

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

import workload_report.db.session as session_module
from workload_report.db.models import (
    Alert,
    Base,
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


# Enable foreign key constraints for SQLite
@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _in_range(day: dt.date, start: dt.date, end: dt.date) -> bool:
    return start <= day <= end


class InMemoryReportSource:
    """Dict-backed ReportDataSource for engine tests.

    Athletes listed in failing_athletes raise RuntimeError from get_athlete.
    """

    def __init__(self) -> None:
        self.teams: dict[str, TeamInfo] = {}
        self.athletes: dict[str, AthleteProfile] = {}
        self.sessions: dict[str, list[TrainingSession]] = defaultdict(list)
        self.weights: dict[str, list[WeightEntry]] = defaultdict(list)
        self.sleep: dict[str, list[SleepEntry]] = defaultdict(list)
        self.motivation: dict[str, list[MotivationEntry]] = defaultdict(list)
        self.performance: dict[str, list[PerformanceEntry]] = defaultdict(list)
        self.alerts: dict[str, list[AlertEntry]] = defaultdict(list)
        self.failing_athletes: set[str] = set()
        self.roster_error: Exception | None = None

    def add_team(self, team_id: str, name: str) -> None:
        self.teams[team_id] = TeamInfo(id=team_id, name=name)

    def add_athlete(self, athlete_id: str, name: str, team_id: str = "team-1", email: str | None = None) -> None:
        self.athletes[athlete_id] = AthleteProfile(id=athlete_id, name=name, email=email, team_id=team_id)

    def add_daily_training(
        self,
        athlete_id: str,
        start: dt.date,
        days: int,
        rpe: float = 5,
        duration_min: float = 60,
    ) -> None:
        for offset in range(days):
            self.sessions[athlete_id].append(
                TrainingSession(
                    athlete_id=athlete_id,
                    date=start + dt.timedelta(days=offset),
                    rpe=rpe,
                    duration_min=duration_min,
                )
            )

    def get_team(self, team_id: str) -> TeamInfo | None:
        return self.teams.get(team_id)

    def list_team_athletes(self, team_id: str) -> list[AthleteProfile]:
        if self.roster_error is not None:
            raise self.roster_error
        return sorted((a for a in self.athletes.values() if a.team_id == team_id), key=lambda a: a.id)

    def get_athlete(self, athlete_id: str) -> AthleteProfile | None:
        if athlete_id in self.failing_athletes:
            raise RuntimeError(f"storage unavailable for {athlete_id}")
        return self.athletes.get(athlete_id)

    def list_training_sessions(self, athlete_id: str, start: dt.date, end: dt.date) -> list[TrainingSession]:
        return [s for s in self.sessions[athlete_id] if _in_range(s.date, start, end)]

    def list_weight_records(self, athlete_id: str, start: dt.date, end: dt.date) -> list[WeightEntry]:
        return [r for r in self.weights[athlete_id] if _in_range(r.date, start, end)]

    def list_sleep_records(self, athlete_id: str, start: dt.date, end: dt.date) -> list[SleepEntry]:
        return [r for r in self.sleep[athlete_id] if _in_range(r.date, start, end)]

    def list_motivation_records(self, athlete_id: str, start: dt.date, end: dt.date) -> list[MotivationEntry]:
        return [r for r in self.motivation[athlete_id] if _in_range(r.date, start, end)]

    def list_performance_records(self, athlete_id: str, start: dt.date, end: dt.date) -> list[PerformanceEntry]:
        return [r for r in self.performance[athlete_id] if _in_range(r.date, start, end)]

    def list_alerts(self, athlete_id: str, start: dt.date, end: dt.date) -> list[AlertEntry]:
        return [a for a in self.alerts[athlete_id] if _in_range(a.created_at.date(), start, end)]


@pytest.fixture
def source() -> InMemoryReportSource:
    """Empty in-memory source with a single team "team-1" named Falcons."""
    memory_source = InMemoryReportSource()
    memory_source.add_team("team-1", "Falcons")
    return memory_source


@pytest.fixture
def db_engine(tmp_path, monkeypatch):
    """File-backed SQLite database patched in as the application engine.

    A file (not :memory:) so athlete builds running in worker threads see
    the same data.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'reports.db'}",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)

    monkeypatch.setattr(session_module, "_get_engine", lambda: engine)
    monkeypatch.setattr(session_module, "_SessionLocal", None)

    yield engine

    engine.dispose()


@pytest.fixture
def seeded_db(db_engine):
    """Two teams: Falcons (Alice trains daily, Bob never trains, one coach) and an empty Hawks.

    Alice has continuous load history from 2024-02-03, so her ACWR series is
    complete for every day of March 2024.
    """
    with get_session() as session:
        session.add_all([Team(id="team-1", name="Falcons"), Team(id="team-2", name="Hawks")])
        session.flush()
        session.add_all(
            [
                User(id="u-alice", name="Alice", email="alice@example.com", role="athlete", team_id="team-1"),
                User(id="u-bob", name="Bob", email="bob@example.com", role="athlete", team_id="team-1"),
                User(id="u-coach", name="Carol", email="carol@example.com", role="coach", team_id="team-1"),
            ]
        )
        session.flush()

        day = dt.date(2024, 2, 3)
        while day <= dt.date(2024, 3, 31):
            session.add(TrainingRecord(user_id="u-alice", date=day, rpe=5, duration_min=60))
            day += dt.timedelta(days=1)

        session.add_all(
            [
                WeightRecord(user_id="u-alice", date=dt.date(2024, 3, 1), weight_kg=70.0),
                WeightRecord(user_id="u-alice", date=dt.date(2024, 3, 31), weight_kg=71.0),
                SleepRecord(user_id="u-alice", date=dt.date(2024, 3, 5), sleep_hours=6.0, sleep_quality=3),
                SleepRecord(user_id="u-alice", date=dt.date(2024, 3, 6), sleep_hours=6.5, sleep_quality=4),
                SleepRecord(user_id="u-bob", date=dt.date(2024, 3, 5), sleep_hours=8.0, sleep_quality=4),
                MotivationRecord(
                    user_id="u-alice",
                    date=dt.date(2024, 3, 5),
                    motivation_level=7,
                    energy_level=6,
                    stress_level=3,
                ),
                PerformanceRecord(
                    user_id="u-alice",
                    test_type_id="sprint",
                    date=dt.date(2024, 3, 2),
                    values={"result": 10},
                ),
                PerformanceRecord(
                    user_id="u-alice",
                    test_type_id="sprint",
                    date=dt.date(2024, 3, 30),
                    values={"result": "11.5"},
                ),
                Alert(
                    user_id="u-alice",
                    priority="high",
                    message="ACWR spike",
                    created_at=dt.datetime(2024, 3, 10, 12, 0),
                ),
                Alert(
                    user_id="u-alice",
                    priority="low",
                    message="Outside period",
                    created_at=dt.datetime(2024, 4, 1, 0, 0),
                ),
            ]
        )

    return db_engine

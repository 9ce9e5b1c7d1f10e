"""Tests for report generation and report history against SQLite."""

import datetime as dt

import pytest

from workload_report.reports.errors import InvalidPeriodError, RosterFetchError, TeamNotFoundError
from workload_report.services.report_generation import ReportGenerationService, ReportNotFoundError

FIXED_NOW = dt.datetime(2024, 4, 1, 8, 0, tzinfo=dt.timezone.utc)


@pytest.fixture
def service(seeded_db) -> ReportGenerationService:
    return ReportGenerationService(clock=lambda: FIXED_NOW, max_concurrency=2)


def _generate_march(service: ReportGenerationService, **kwargs):
    return service.generate(
        "team-1",
        "custom",
        custom_start=dt.date(2024, 3, 1),
        custom_end=dt.date(2024, 3, 31),
        **kwargs,
    )


def test_generate_stores_completed_report(service):
    row = _generate_march(service, generated_by="u-coach")

    assert row.generation_status == "completed"
    assert row.title == "Falcons Report - 2024-03-01 ~ 2024-03-31"
    assert row.report_type == "custom"
    assert row.generated_by == "u-coach"
    assert row.athlete_ids == ["u-alice", "u-bob"]
    assert row.summary_data == {
        "totalAthletes": 2,
        "activeAthletes": 1,
        "teamAverageLoad": 300.0,
        "teamAverageACWR": 1.0,
        "highRiskCount": 1,
        "mediumRiskCount": 0,
        "lowRiskCount": 1,
        "totalAlerts": 1,
        "criticalAlerts": 1,
    }
    assert row.insights[0] == "Team average ACWR (1.00) is within the recommended range."
    assert "Coach athletes with insufficient sleep on sleep habits (Alice)." in row.recommendations
    assert row.detailed_data["athletes"][0]["performance_data"]["improvements"] == 1
    assert row.detailed_data["failures"] == []


def test_relative_period_uses_today(service):
    row = service.generate("team-1", "weekly", today=dt.date(2024, 3, 31))

    assert row.period_start == dt.date(2024, 3, 24)
    assert row.period_end == dt.date(2024, 3, 31)


def test_unknown_team_stores_nothing(service):
    for _ in range(3):
        with pytest.raises(TeamNotFoundError):
            service.generate("team-404", "monthly", today=dt.date(2024, 3, 31))

    assert service.list_reports("team-404") == []


def test_roster_failure_stores_nothing(seeded_db, source):
    source.roster_error = ConnectionError("db down")
    service = ReportGenerationService(source=source)

    with pytest.raises(RosterFetchError):
        service.generate("team-1", "monthly", today=dt.date(2024, 3, 31))

    assert service.list_reports("team-1") == []


def test_invalid_period_stores_nothing(service):
    with pytest.raises(InvalidPeriodError):
        service.generate("team-1", "custom", custom_start=dt.date(2024, 3, 1))

    assert service.list_reports("team-1") == []


def test_list_reports_respects_limit(service):
    for _ in range(3):
        _generate_march(service)

    assert len(service.list_reports("team-1")) == 3
    assert len(service.list_reports("team-1", limit=2)) == 2
    assert service.list_reports("team-2") == []


def test_mark_viewed_increments_count(service):
    row = _generate_march(service)

    service.mark_viewed(row.id)
    service.mark_viewed(row.id)

    stored = service.get_report(row.id)
    assert stored.view_count == 2
    assert stored.viewed_at is not None


def test_delete_report(service):
    row = _generate_march(service)

    service.delete_report(row.id)

    with pytest.raises(ReportNotFoundError):
        service.get_report(row.id)
    with pytest.raises(ReportNotFoundError):
        service.delete_report(row.id)


def test_mark_viewed_unknown_report(service):
    with pytest.raises(ReportNotFoundError):
        service.mark_viewed("missing")

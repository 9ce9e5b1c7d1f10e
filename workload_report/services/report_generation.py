"""Team report generation and report history.

Resolves the period, runs the engine, and persists the finished report as a
single row. Failed generation attempts are logged and re-raised; nothing is
stored for them.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from workload_report.config.settings import settings
from workload_report.db.models import GeneratedReport
from workload_report.db.repository import SqlReportDataSource
from workload_report.db.session import get_session
from workload_report.reports.errors import NotFoundError, ReportError
from workload_report.reports.models import TeamReportSummary
from workload_report.reports.period import PeriodType, ReportPeriod, resolve_period
from workload_report.reports.sources import ReportDataSource
from workload_report.reports.team_report import TeamReportAggregator

SessionFactory = Callable[[], AbstractContextManager[Session]]


class ReportNotFoundError(NotFoundError):
    """Raised when a stored report does not exist."""

    def __init__(self, report_id: str) -> None:
        super().__init__(f"Report not found: {report_id}")
        self.report_id = report_id


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def report_title(team_name: str, period: ReportPeriod) -> str:
    return f"{team_name} Report - {period.start.isoformat()} ~ {period.end.isoformat()}"


def build_summary_data(summary: TeamReportSummary) -> dict[str, Any]:
    """Flattened numeric rollup stored alongside the full report."""
    return {
        "totalAthletes": summary.total_athletes,
        "activeAthletes": summary.active_athletes,
        "teamAverageLoad": summary.team_average_load,
        "teamAverageACWR": summary.team_average_acwr,
        "highRiskCount": summary.high_risk_count,
        "mediumRiskCount": summary.medium_risk_count,
        "lowRiskCount": summary.low_risk_count,
        "totalAlerts": summary.total_alerts,
        "criticalAlerts": summary.critical_alerts,
    }


def build_report_row(summary: TeamReportSummary) -> dict[str, Any]:
    """Map a finished team report to the generated_reports row shape."""
    return {
        "report_type": summary.period.type,
        "title": report_title(summary.team_name, summary.period),
        "period_start": summary.period.start,
        "period_end": summary.period.end,
        "team_id": summary.team_id,
        "athlete_ids": [a.athlete_id for a in summary.athletes],
        "summary_data": build_summary_data(summary),
        "detailed_data": summary.model_dump(mode="json"),
        "insights": list(summary.insights),
        "recommendations": list(summary.recommendations),
        "generation_status": "completed",
        "generated_at": summary.generated_at,
    }


class ReportGenerationService:
    """Generates, stores and manages team reports.

    Args:
        source: Data source for the engine (defaults to the SQL store)
        session_factory: Context manager factory for report persistence
        clock: Source of "now" for generated_at and viewed_at
    """

    def __init__(
        self,
        source: ReportDataSource | None = None,
        session_factory: SessionFactory | None = None,
        clock: Callable[[], dt.datetime] = _utcnow,
        max_concurrency: int | None = None,
    ) -> None:
        self._session_factory = session_factory or get_session
        self.source = source or SqlReportDataSource(self._session_factory)
        self.clock = clock
        self.aggregator = TeamReportAggregator(self.source, max_concurrency=max_concurrency, clock=clock)

    def generate(
        self,
        team_id: str,
        period_type: PeriodType,
        *,
        today: dt.date | None = None,
        custom_start: dt.date | None = None,
        custom_end: dt.date | None = None,
        generated_by: str | None = None,
    ) -> GeneratedReport:
        """Generate and persist a team report.

        Args:
            team_id: Team ID
            period_type: Period keyword; "custom" needs custom_start and custom_end
            today: Reference date for relative periods (defaults to the clock's date)
            custom_start: Custom period start
            custom_end: Custom period end
            generated_by: Optional ID of the requesting user

        Returns:
            The stored GeneratedReport row

        Raises:
            InvalidPeriodError: If the period cannot be resolved (nothing is stored)
            ReportError: For fatal engine errors (nothing is stored)
        """
        reference_day = today or self.clock().date()
        period = resolve_period(period_type, reference_day, custom_start, custom_end)

        try:
            summary = self.aggregator.build_sync(team_id, period)
        except ReportError as e:
            logger.error(f"Report generation failed for team_id={team_id}: {e}")
            raise

        if summary.failures:
            logger.warning(
                f"Team report for team_id={team_id} excludes {len(summary.failures)} athlete(s): "
                f"{', '.join(f.athlete_id for f in summary.failures)}"
            )

        row = GeneratedReport(**build_report_row(summary), generated_by=generated_by)
        with self._session_factory() as session:
            session.add(row)
            session.commit()
            session.refresh(row)
            session.expunge(row)

        logger.info(f"Stored report report_id={row.id} for team_id={team_id}, period={period.start}..{period.end}")
        return row

    def list_reports(self, team_id: str, limit: int | None = None) -> list[GeneratedReport]:
        """Stored reports for a team, newest first."""
        with self._session_factory() as session:
            rows = (
                session.execute(
                    select(GeneratedReport)
                    .where(GeneratedReport.team_id == team_id)
                    .order_by(GeneratedReport.created_at.desc(), GeneratedReport.id)
                    .limit(limit or settings.report_history_limit)
                )
                .scalars()
                .all()
            )
            for row in rows:
                session.expunge(row)
            return list(rows)

    def get_report(self, report_id: str) -> GeneratedReport:
        with self._session_factory() as session:
            row = session.get(GeneratedReport, report_id)
            if row is None:
                raise ReportNotFoundError(report_id)
            session.expunge(row)
            return row

    def mark_viewed(self, report_id: str) -> None:
        with self._session_factory() as session:
            row = session.get(GeneratedReport, report_id)
            if row is None:
                raise ReportNotFoundError(report_id)
            row.viewed_at = self.clock()
            row.view_count = (row.view_count or 0) + 1

    def delete_report(self, report_id: str) -> None:
        with self._session_factory() as session:
            row = session.get(GeneratedReport, report_id)
            if row is None:
                raise ReportNotFoundError(report_id)
            session.delete(row)
        logger.info(f"Deleted report report_id={report_id}")

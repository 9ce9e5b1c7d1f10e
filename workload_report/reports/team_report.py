"""Team report aggregation.

Builds every athlete's report concurrently, isolates per-athlete failures,
and rolls successful reports up into a TeamReportSummary.
"""

from __future__ import annotations

import asyncio
import datetime as dt
from collections.abc import Callable
from dataclasses import dataclass
from statistics import mean

from loguru import logger

from workload_report.config.settings import settings
from workload_report.reports.athlete_report import AthleteReportBuilder
from workload_report.reports.errors import RosterFetchError, TeamNotFoundError
from workload_report.reports.insights import InsightEngine, TeamRollup
from workload_report.reports.models import AthleteReportData, AthleteReportFailure, TeamReportSummary
from workload_report.reports.period import ReportPeriod
from workload_report.reports.records import AthleteProfile
from workload_report.reports.sources import ReportDataSource


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


@dataclass(frozen=True)
class AthleteReportOutcome:
    """Result of one athlete build: exactly one of report / failure is set."""

    athlete_id: str
    report: AthleteReportData | None = None
    failure: AthleteReportFailure | None = None

    @property
    def ok(self) -> bool:
        return self.report is not None


class TeamReportAggregator:
    """Builds a team report from per-athlete reports.

    Rules:
    - Missing team or roster fetch failure aborts the whole report
    - Any exception for one athlete excludes that athlete and is recorded in failures
    - Athlete builds run concurrently, bounded by max_concurrency
    - Reports are sorted by athlete id before aggregation
    """

    def __init__(
        self,
        source: ReportDataSource,
        *,
        athlete_builder: AthleteReportBuilder | None = None,
        insight_engine: InsightEngine | None = None,
        max_concurrency: int | None = None,
        clock: Callable[[], dt.datetime] = _utcnow,
    ) -> None:
        self.source = source
        self.athlete_builder = athlete_builder or AthleteReportBuilder(source)
        self.insight_engine = insight_engine or InsightEngine()
        self.max_concurrency = max(1, max_concurrency or settings.report_max_concurrency)
        self.clock = clock

    async def build(self, team_id: str, period: ReportPeriod) -> TeamReportSummary:
        """Build the team report.

        Args:
            team_id: Team ID
            period: Resolved inclusive period

        Returns:
            TeamReportSummary over all successfully built athlete reports

        Raises:
            TeamNotFoundError: If the team does not exist
            RosterFetchError: If the roster cannot be loaded
        """
        team = await asyncio.to_thread(self.source.get_team, team_id)
        if team is None:
            raise TeamNotFoundError(team_id)

        try:
            roster = await asyncio.to_thread(self.source.list_team_athletes, team_id)
        except Exception as e:
            logger.exception(f"Failed to fetch roster for team_id={team_id}")
            raise RosterFetchError(f"Failed to fetch roster for team {team_id}: {e}") from e

        logger.info(
            f"Building team report team_id={team_id}, athletes={len(roster)}, "
            f"period={period.start}..{period.end}, max_concurrency={self.max_concurrency}"
        )

        semaphore = asyncio.Semaphore(self.max_concurrency)
        outcomes = await asyncio.gather(*[self._build_athlete(athlete, period, semaphore) for athlete in roster])

        reports = sorted((o.report for o in outcomes if o.ok), key=lambda r: r.athlete_id)
        failures = sorted((o.failure for o in outcomes if not o.ok), key=lambda f: f.athlete_id)

        summary = self._summarize(team.id, team.name, period, len(roster), reports, failures)

        logger.info(
            f"Team report built team_id={team_id}: reports={len(reports)}, failures={len(failures)}, "
            f"high_risk={summary.high_risk_count}, team_average_acwr={summary.team_average_acwr:.2f}"
        )
        return summary

    def build_sync(self, team_id: str, period: ReportPeriod) -> TeamReportSummary:
        """Synchronous wrapper for callers without an event loop."""
        return asyncio.run(self.build(team_id, period))

    async def _build_athlete(
        self,
        athlete: AthleteProfile,
        period: ReportPeriod,
        semaphore: asyncio.Semaphore,
    ) -> AthleteReportOutcome:
        async with semaphore:
            try:
                report = await asyncio.to_thread(self.athlete_builder.build, athlete.id, period)
            except Exception as e:
                logger.exception(f"Error generating report for athlete_id={athlete.id}, skipping athlete")
                return AthleteReportOutcome(
                    athlete_id=athlete.id,
                    failure=AthleteReportFailure(
                        athlete_id=athlete.id,
                        athlete_name=athlete.name,
                        error_type=type(e).__name__,
                        message=str(e),
                    ),
                )
            return AthleteReportOutcome(athlete_id=athlete.id, report=report)

    def _summarize(
        self,
        team_id: str,
        team_name: str,
        period: ReportPeriod,
        total_athletes: int,
        reports: list[AthleteReportData],
        failures: list[AthleteReportFailure],
    ) -> TeamReportSummary:
        active = [r for r in reports if r.training_records.total_sessions > 0]
        active_athletes = len(active)

        team_average_load = (
            sum(r.training_records.average_load for r in active) / active_athletes if active_athletes > 0 else 0.0
        )

        with_acwr = [r.acwr_data.current for r in reports if r.acwr_data.current > 0]
        team_average_acwr = mean(with_acwr) if with_acwr else 0.0

        high_risk_count = sum(1 for r in reports if r.acwr_data.risk_level == "high")
        medium_risk_count = sum(1 for r in reports if r.acwr_data.risk_level == "medium")
        low_risk_count = sum(1 for r in reports if r.acwr_data.risk_level == "low")

        total_alerts = sum(r.alerts.total for r in reports)
        critical_alerts = sum(r.alerts.high for r in reports)

        result = self.insight_engine.evaluate(
            TeamRollup(
                team_average_acwr=team_average_acwr,
                high_risk_count=high_risk_count,
                critical_alerts=critical_alerts,
                athletes=reports,
            )
        )

        return TeamReportSummary(
            team_id=team_id,
            team_name=team_name,
            period=period,
            generated_at=self.clock(),
            total_athletes=total_athletes,
            active_athletes=active_athletes,
            team_average_load=team_average_load,
            team_average_acwr=team_average_acwr,
            high_risk_count=high_risk_count,
            medium_risk_count=medium_risk_count,
            low_risk_count=low_risk_count,
            total_alerts=total_alerts,
            new_alerts=total_alerts,
            critical_alerts=critical_alerts,
            athletes=reports,
            insights=result.insights,
            recommendations=result.recommendations,
            failures=failures,
        )

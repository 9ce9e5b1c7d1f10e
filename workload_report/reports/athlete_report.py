"""Single-athlete report orchestration.

Loads the six record domains for one athlete and reduces them into an
AthleteReportData. Holds no state beyond the call.
"""

from __future__ import annotations

from loguru import logger

from workload_report.metrics.acwr import WorkloadSeriesCalculator
from workload_report.reports.aggregators import (
    AlertAggregator,
    MotivationAggregator,
    PerformanceAggregator,
    SleepAggregator,
    TrainingLoadAggregator,
    WeightAggregator,
)
from workload_report.reports.errors import AthleteNotFoundError
from workload_report.reports.models import AthleteReportData
from workload_report.reports.period import ReportPeriod
from workload_report.reports.sources import ReportDataSource


class AthleteReportBuilder:
    """Builds one athlete's report for a period.

    Only a missing athlete is fatal. An empty domain degrades to its empty
    summary; exceptions raised by the data source propagate to the caller.
    """

    def __init__(
        self,
        source: ReportDataSource,
        *,
        workload_calculator: WorkloadSeriesCalculator | None = None,
        performance_aggregator: PerformanceAggregator | None = None,
    ) -> None:
        self.source = source
        self.workload_calculator = workload_calculator or WorkloadSeriesCalculator()
        self.training_aggregator = TrainingLoadAggregator()
        self.weight_aggregator = WeightAggregator()
        self.sleep_aggregator = SleepAggregator()
        self.motivation_aggregator = MotivationAggregator()
        self.performance_aggregator = performance_aggregator or PerformanceAggregator()
        self.alert_aggregator = AlertAggregator()

    def build(self, athlete_id: str, period: ReportPeriod) -> AthleteReportData:
        """Build the report.

        Args:
            athlete_id: Athlete ID
            period: Resolved inclusive period

        Returns:
            AthleteReportData for the period

        Raises:
            AthleteNotFoundError: If the athlete record does not exist
        """
        athlete = self.source.get_athlete(athlete_id)
        if athlete is None:
            raise AthleteNotFoundError(athlete_id)

        # ACWR windows need load history from before the period start
        history_start = self.workload_calculator.history_start(period.start)
        load_history = self.source.list_training_sessions(athlete_id, history_start, period.end)
        sessions = [s for s in load_history if period.contains(s.date)]

        acwr_series = self.workload_calculator.calculate(load_history, start=period.start, end=period.end)

        weights = self.source.list_weight_records(athlete_id, period.start, period.end)
        sleep = self.source.list_sleep_records(athlete_id, period.start, period.end)
        motivation = self.source.list_motivation_records(athlete_id, period.start, period.end)
        performance = self.source.list_performance_records(athlete_id, period.start, period.end)
        alerts = [
            a for a in self.source.list_alerts(athlete_id, period.start, period.end) if period.contains(a.created_at.date())
        ]

        report = AthleteReportData(
            athlete_id=athlete.id,
            athlete_name=athlete.name,
            athlete_email=athlete.email,
            training_records=self.training_aggregator.aggregate(sessions),
            acwr_data=self.workload_calculator.summarize(acwr_series),
            weight_data=self.weight_aggregator.aggregate(weights),
            sleep_data=self.sleep_aggregator.aggregate(sleep),
            motivation_data=self.motivation_aggregator.aggregate(motivation),
            performance_data=self.performance_aggregator.aggregate(performance),
            alerts=self.alert_aggregator.aggregate(alerts),
        )

        logger.debug(
            f"Built athlete report athlete_id={athlete_id}, period={period.start}..{period.end}: "
            f"sessions={report.training_records.total_sessions}, acwr_points={len(acwr_series)}, "
            f"risk={report.acwr_data.risk_level}"
        )
        return report

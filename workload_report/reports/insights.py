"""Rule-based team insights and recommendations.

Rules are evaluated in a fixed order against the team rollup. Every matching
rule contributes one insight and at most one recommendation. Insights are
descriptive; recommendations name the athletes they concern.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from pydantic import BaseModel, ConfigDict, Field

from workload_report.reports.models import AthleteReportData

ACWR_UPPER_BOUND = 1.3
ACWR_LOWER_BOUND = 0.8
MIN_SLEEP_HOURS = 7.0
MIN_MOTIVATION = 3.0


class TeamRollup(BaseModel):
    """Team-level figures the insight rules inspect."""

    model_config = ConfigDict(frozen=True)

    team_average_acwr: float = 0.0
    high_risk_count: int = 0
    critical_alerts: int = 0
    athletes: list[AthleteReportData] = Field(default_factory=list)


class InsightResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    insights: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


# (insight, recommendation) or None when the rule does not fire
RuleOutcome = tuple[str, str | None] | None
InsightRule = Callable[[TeamRollup], RuleOutcome]


def _names(athletes: Sequence[AthleteReportData]) -> str:
    return ", ".join(a.athlete_name for a in athletes)


def acwr_band_rule(rollup: TeamRollup) -> RuleOutcome:
    """Team average ACWR above, below or within the recommended band. Always fires."""
    acwr = rollup.team_average_acwr
    if acwr > ACWR_UPPER_BOUND:
        return (
            f"Team average ACWR ({acwr:.2f}) is above the recommended range. Overall training load is high.",
            "Review team training intensity and volume, and schedule adequate rest days.",
        )
    if acwr < ACWR_LOWER_BOUND:
        return (
            f"Team average ACWR ({acwr:.2f}) is below the recommended range. Training load may be insufficient.",
            "Progressively increase training load while monitoring athlete condition.",
        )
    return (f"Team average ACWR ({acwr:.2f}) is within the recommended range.", None)


def high_risk_rule(rollup: TeamRollup) -> RuleOutcome:
    if rollup.high_risk_count <= 0:
        return None
    high_risk = [a for a in rollup.athletes if a.acwr_data.risk_level == "high"]
    return (
        f"{rollup.high_risk_count} athlete(s) are in a high-risk state and need individual attention.",
        f"Prioritise load adjustment for high-risk athletes: {_names(high_risk)}.",
    )


def critical_alert_rule(rollup: TeamRollup) -> RuleOutcome:
    if rollup.critical_alerts <= 0:
        return None
    return (
        f"{rollup.critical_alerts} high-priority alert(s) have been raised.",
        "Respond promptly to high-priority alerts.",
    )


def low_sleep_rule(rollup: TeamRollup) -> RuleOutcome:
    low_sleep = [
        a
        for a in rollup.athletes
        if a.sleep_data.average_hours is not None and a.sleep_data.average_hours < MIN_SLEEP_HOURS
    ]
    if not low_sleep:
        return None
    return (
        f"{len(low_sleep)} athlete(s) average less than 7 hours of sleep.",
        f"Coach athletes with insufficient sleep on sleep habits ({_names(low_sleep)}).",
    )


def low_motivation_rule(rollup: TeamRollup) -> RuleOutcome:
    low_motivation = [
        a
        for a in rollup.athletes
        if a.motivation_data.average_motivation is not None and a.motivation_data.average_motivation < MIN_MOTIVATION
    ]
    if not low_motivation:
        return None
    return (
        f"{len(low_motivation)} athlete(s) show low motivation.",
        f"Hold individual check-ins with athletes showing low motivation ({_names(low_motivation)}).",
    )


DEFAULT_RULES: tuple[InsightRule, ...] = (
    acwr_band_rule,
    high_risk_rule,
    critical_alert_rule,
    low_sleep_rule,
    low_motivation_rule,
)


class InsightEngine:
    """Evaluates the rule table in order and de-duplicates the output."""

    def __init__(self, rules: Sequence[InsightRule] = DEFAULT_RULES) -> None:
        self.rules = tuple(rules)

    def evaluate(self, rollup: TeamRollup) -> InsightResult:
        insights: list[str] = []
        recommendations: list[str] = []

        for rule in self.rules:
            outcome = rule(rollup)
            if outcome is None:
                continue
            insight, recommendation = outcome
            if insight not in insights:
                insights.append(insight)
            if recommendation is not None and recommendation not in recommendations:
                recommendations.append(recommendation)

        return InsightResult(insights=insights, recommendations=recommendations)

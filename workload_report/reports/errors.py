"""Error types for report generation.

Fatal errors abort a whole team report. Per-athlete errors are caught by the
team aggregator and reported as failures instead.
"""


class ReportError(Exception):
    """Base exception for all reporting errors."""


class NotFoundError(ReportError):
    """Raised when a required entity does not exist."""


class TeamNotFoundError(NotFoundError):
    """Raised when the requested team does not exist."""

    def __init__(self, team_id: str) -> None:
        super().__init__(f"Team not found: {team_id}")
        self.team_id = team_id


class AthleteNotFoundError(NotFoundError):
    """Raised when an athlete record cannot be loaded. No partial report is built."""

    def __init__(self, athlete_id: str) -> None:
        super().__init__(f"Athlete not found: {athlete_id}")
        self.athlete_id = athlete_id


class RosterFetchError(ReportError):
    """Raised when the team roster cannot be fetched."""


class InvalidPeriodError(ReportError):
    """Raised when a report period cannot be resolved or is inverted."""

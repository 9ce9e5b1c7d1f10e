"""Raw per-athlete records consumed by the reporting engine.

These are read-only snapshots of stored rows. The engine never mutates them.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

AlertPriority = Literal["high", "medium", "low"]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class AthleteProfile(_Record):
    id: str
    name: str
    email: str | None = None
    team_id: str | None = None


class TeamInfo(_Record):
    id: str
    name: str


class TrainingSession(_Record):
    """Single training session. load = rpe * duration_min when not stored."""

    athlete_id: str
    date: dt.date
    rpe: float = Field(..., ge=0, le=10)
    duration_min: float = Field(..., ge=0)
    load: float

    @model_validator(mode="before")
    @classmethod
    def _derive_load(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("load") is None:
            rpe = data.get("rpe")
            duration_min = data.get("duration_min")
            if rpe is not None and duration_min is not None:
                return {**data, "load": float(rpe) * float(duration_min)}
        return data


class WeightEntry(_Record):
    athlete_id: str
    date: dt.date
    weight_kg: float


class SleepEntry(_Record):
    athlete_id: str
    date: dt.date
    sleep_hours: float
    sleep_quality: float | None = None


class MotivationEntry(_Record):
    athlete_id: str
    date: dt.date
    motivation_level: float | None = None
    energy_level: float | None = None
    stress_level: float | None = None


class PerformanceEntry(_Record):
    athlete_id: str
    date: dt.date
    test_type_id: str
    result: float | None = None


class AlertEntry(_Record):
    athlete_id: str
    created_at: dt.datetime
    priority: AlertPriority
    is_resolved: bool = False

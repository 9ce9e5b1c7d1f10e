"""Workload risk classification.

Risk is a pure function of the most recent ACWR value. Thresholds are fixed
policy constants, not calibrated values.
"""

from collections.abc import Iterable
from typing import Literal

RiskLevel = Literal["low", "medium", "high"]

HIGH_RISK_UPPER = 1.5
HIGH_RISK_LOWER = 0.7
MEDIUM_RISK_UPPER = 1.3
MEDIUM_RISK_LOWER = 0.8

# Watch band: wider than the high-risk thresholds
DANGER_ZONE_LOWER = 0.8
DANGER_ZONE_UPPER = 1.3


class RiskClassifier:
    """Maps ACWR values to risk levels and danger-zone counts.

    Boundary values fall into the stricter band: 1.3 and 0.8 are medium,
    1.5 and 0.7 are high. A current value of 0 (no computable ACWR) is high.
    """

    def classify(self, current: float) -> RiskLevel:
        if current >= HIGH_RISK_UPPER or current <= HIGH_RISK_LOWER:
            return "high"
        if current >= MEDIUM_RISK_UPPER or current <= MEDIUM_RISK_LOWER:
            return "medium"
        return "low"

    def days_in_danger_zone(self, values: Iterable[float]) -> int:
        """Count values outside [0.8, 1.3]."""
        return sum(1 for v in values if v < DANGER_ZONE_LOWER or v > DANGER_ZONE_UPPER)

from __future__ import annotations

from crashiq.core.config import DEFAULT_THRESHOLDS, Thresholds
from crashiq.core.models import Severity


def classify_severity(
    g_force: float,
    speed_mph: float,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> Severity:
    """
    Severity tier from g-force and speed.

    G-force and speed are independent signals: either one reaching a tier's
    threshold is enough to put the event in that tier.
    """
    if g_force >= thresholds.severe_g or speed_mph >= thresholds.severe_speed:
        return Severity.SEVERE
    if g_force >= thresholds.moderate_g or speed_mph >= thresholds.moderate_speed:
        return Severity.MODERATE
    return Severity.MINOR

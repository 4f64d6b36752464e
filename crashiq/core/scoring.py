from __future__ import annotations

import math

from crashiq.core.contract import (
    AIRBAG_G_TRIGGER,
    CONFIDENCE_ACCEL_NORMALIZER,
    CONFIDENCE_G_NORMALIZER,
    DEFAULT_ACCIDENT_DETECTION_G,
)
from crashiq.core.models import Severity


def round2(x: float) -> float:
    """Round to two decimals, halves away from zero."""
    scaled = math.floor(abs(x) * 100.0 + 0.5) / 100.0
    return math.copysign(scaled, x) if x else 0.0


def estimate_confidence(g_force: float, x: float, y: float, z: float) -> float:
    """
    Confidence (0..1) that the event is a real collision, from how strongly
    the g-force and the accelerometer vector register.
    """
    g_conf = min(g_force / CONFIDENCE_G_NORMALIZER, 1.0)
    accel_conf = min(math.sqrt(x * x + y * y + z * z) / CONFIDENCE_ACCEL_NORMALIZER, 1.0)
    return round2((g_conf + accel_conf) / 2.0)


def was_speeding(speed_mph: float, speed_limit_mph: float) -> bool:
    return speed_mph > speed_limit_mph


def airbag_likely(g_force: float, severity: Severity) -> bool:
    return g_force > AIRBAG_G_TRIGGER or severity is Severity.SEVERE


def is_accident_detected(g_force: float, threshold: float | None = None) -> bool:
    """Quick check whether a g-force reading meets the accident threshold (default 2.5 g)."""
    effective = DEFAULT_ACCIDENT_DETECTION_G if threshold is None else threshold
    return g_force >= effective

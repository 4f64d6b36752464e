from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from crashiq.core.models import ImpactType


@dataclass(frozen=True)
class ImpactRule:
    name: str
    predicate: Callable[[float, float, float], bool]
    result: ImpactType


def _rollover(x: float, y: float, z: float) -> bool:
    ax, ay, az = abs(x), abs(y), abs(z)
    return az > 6.0 or (az > 4.0 and az > 1.5 * ax and az > 1.5 * ay)


def _t_bone(x: float, y: float, z: float) -> bool:
    return abs(y) > 4.5 and abs(y) > 1.5 * abs(x)


def _head_on(x: float, y: float, z: float) -> bool:
    return x < -7.0


def _frontal(x: float, y: float, z: float) -> bool:
    return x < -3.5 and abs(x) > abs(y)


def _rear_ended(x: float, y: float, z: float) -> bool:
    return x > 1.5 and abs(x) > abs(y)


def _side_swipe(x: float, y: float, z: float) -> bool:
    return abs(y) > 1.5 and abs(y) > abs(x)


# Evaluated top-down, first match wins. The order is the algorithm.
IMPACT_RULES: tuple[ImpactRule, ...] = (
    ImpactRule("rollover", _rollover, ImpactType.ROLLOVER),
    ImpactRule("t_bone", _t_bone, ImpactType.SIDE),
    ImpactRule("head_on", _head_on, ImpactType.FRONTAL),
    ImpactRule("frontal", _frontal, ImpactType.FRONTAL),
    ImpactRule("rear_ended", _rear_ended, ImpactType.REAR),
    ImpactRule("side_swipe", _side_swipe, ImpactType.SIDE),
)


def _dominant_axis(x: float, y: float, z: float) -> ImpactType:
    """
    Fallback vote between the longitudinal and lateral axes: the one that
    strictly dominates both others decides. A dominant vertical axis below the
    rollover thresholds, or any tie (including all-zero), gives UNKNOWN.
    """
    ax, ay, az = abs(x), abs(y), abs(z)
    if ax > ay and ax > az:
        return ImpactType.FRONTAL if x < 0 else ImpactType.REAR
    if ay > ax and ay > az:
        return ImpactType.SIDE
    return ImpactType.UNKNOWN


def match_impact_rule(x: float, y: float, z: float) -> str:
    """
    Name of the rule that decides the impact type for (x, y, z).
    Returns "dominant_axis" or "unknown" when no explicit rule matched.
    """
    for rule in IMPACT_RULES:
        if rule.predicate(x, y, z):
            return rule.name
    if _dominant_axis(x, y, z) is ImpactType.UNKNOWN:
        return "unknown"
    return "dominant_axis"


def detect_impact_type(x: float, y: float, z: float) -> ImpactType:
    """
    Classify the collision direction from the three accelerometer axes
    (x longitudinal, y lateral, z vertical; g-units).
    """
    for rule in IMPACT_RULES:
        if rule.predicate(x, y, z):
            return rule.result
    return _dominant_axis(x, y, z)

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(str, Enum):
    MINOR = "MINOR"
    MODERATE = "MODERATE"
    SEVERE = "SEVERE"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.MINOR: 0, Severity.MODERATE: 1, Severity.SEVERE: 2}


class ImpactType(str, Enum):
    FRONTAL = "FRONTAL"
    REAR = "REAR"
    SIDE = "SIDE"
    ROLLOVER = "ROLLOVER"
    UNKNOWN = "UNKNOWN"


class ServiceCategory(str, Enum):
    BODY_SHOP = "BODY_SHOP"
    TOW = "TOW"
    HOSPITAL = "HOSPITAL"
    RENTAL = "RENTAL"


# Canonical output order for service categories
SERVICE_ORDER = (
    ServiceCategory.BODY_SHOP,
    ServiceCategory.TOW,
    ServiceCategory.HOSPITAL,
    ServiceCategory.RENTAL,
)


@dataclass(frozen=True)
class TelemetrySample:
    """
    Collision telemetry for one accident event.

    accel_x: longitudinal (negative = deceleration)
    accel_y: lateral
    accel_z: vertical
    All accelerations are in g-units.
    """
    g_force: float
    speed_mph: float
    speed_limit_mph: int
    accel_x: float
    accel_y: float
    accel_z: float


@dataclass(frozen=True)
class Classification:
    severity: Severity
    impact_type: ImpactType
    estimated_speed: float
    was_speeding: bool
    airbag_likely: bool
    confidence: float
    narrative: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "impact_type": self.impact_type.value,
            "estimated_speed": self.estimated_speed,
            "was_speeding": self.was_speeding,
            "airbag_likely": self.airbag_likely,
            "confidence": self.confidence,
            "narrative": self.narrative,
        }


@dataclass(frozen=True)
class DispatchDecision:
    vehicle_drivable: bool
    service_categories: frozenset[ServiceCategory]
    recommendation: str

    def ordered_categories(self) -> list[ServiceCategory]:
        return [c for c in SERVICE_ORDER if c in self.service_categories]

    def to_dict(self) -> dict[str, Any]:
        return {
            "vehicle_drivable": self.vehicle_drivable,
            "service_categories": [c.value for c in self.ordered_categories()],
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class AccidentContext:
    """
    Optional signals gathered by other collaborators (weather, road, outreach).
    None means the signal was not available.
    """
    precipitation: str | None = None
    contributing_factors: tuple[str, ...] | None = None
    outreach_status: str | None = None


@dataclass(frozen=True)
class ReportDirectives:
    recommended_actions: tuple[str, ...] = field(default_factory=tuple)
    alerts: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "recommended_actions": list(self.recommended_actions),
            "alerts": list(self.alerts),
        }

from __future__ import annotations

from crashiq.core.models import ImpactType


# Accelerometer threshold -> collision-type reading, ordered as the detector reads them.
PHYSICS_GUIDE = (
    "X < -7g: Head-on collision or high-speed frontal impact",
    "X between -4g and -7g: Moderate frontal impact or rear-end collision (vehicle hitting something)",
    "X > +2g: Vehicle was struck from behind (pushed forward)",
    "|Y| > 4.5g: T-bone or severe side impact",
    "|Y| between 1.5g and 4.5g: Side-swipe or glancing side impact",
    "|Z| > 4g: Rollover event or vehicle became airborne",
)


INTERPRETATION_RULES = {
    ImpactType.FRONTAL: {
        "pattern": "Longitudinal deceleration",
        "meaning": (
            "Strong negative longitudinal force indicates the vehicle struck an object or "
            "another vehicle head-on or while travelling forward."
        ),
        "risk_type": "Front structure and occupant restraint loading",
    },
    ImpactType.REAR: {
        "pattern": "Forward push",
        "meaning": (
            "Positive longitudinal force indicates the vehicle was struck from behind "
            "and pushed forward."
        ),
        "risk_type": "Rear structure damage and whiplash exposure",
    },
    ImpactType.SIDE: {
        "pattern": "Lateral force",
        "meaning": (
            "Dominant lateral force indicates a T-bone or side-swipe impact against a door "
            "or quarter panel."
        ),
        "risk_type": "Side intrusion and door-side occupant exposure",
    },
    ImpactType.ROLLOVER: {
        "pattern": "Vertical force",
        "meaning": (
            "Dominant vertical force indicates a rollover or the vehicle became airborne."
        ),
        "risk_type": "Roof crush and ejection exposure",
    },
}


def interpret_impact(impact_type: ImpactType) -> dict[str, str]:
    """
    Return interpretation metadata for an impact type.
    """
    return INTERPRETATION_RULES.get(
        impact_type,
        {
            "pattern": "Indeterminate",
            "meaning": "No single accelerometer axis dominates; collision direction could not be determined.",
            "risk_type": "Unclassified impact",
        },
    )

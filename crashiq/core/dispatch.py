from __future__ import annotations

from crashiq.core.contract import DISPATCH_TEXT_MINOR, DISPATCH_TEXT_MODERATE, DISPATCH_TEXT_SEVERE
from crashiq.core.models import DispatchDecision, ServiceCategory, Severity

# Body shops for every accident; tow + rental once the vehicle is not drivable;
# hospitals only for SEVERE.
DISPATCH_POLICY: dict[Severity, DispatchDecision] = {
    Severity.SEVERE: DispatchDecision(
        vehicle_drivable=False,
        service_categories=frozenset(
            {ServiceCategory.BODY_SHOP, ServiceCategory.TOW, ServiceCategory.HOSPITAL, ServiceCategory.RENTAL}
        ),
        recommendation=DISPATCH_TEXT_SEVERE,
    ),
    Severity.MODERATE: DispatchDecision(
        vehicle_drivable=False,
        service_categories=frozenset({ServiceCategory.BODY_SHOP, ServiceCategory.TOW, ServiceCategory.RENTAL}),
        recommendation=DISPATCH_TEXT_MODERATE,
    ),
    Severity.MINOR: DispatchDecision(
        vehicle_drivable=True,
        service_categories=frozenset({ServiceCategory.BODY_SHOP}),
        recommendation=DISPATCH_TEXT_MINOR,
    ),
}


def dispatch_for(severity: Severity) -> DispatchDecision:
    return DISPATCH_POLICY[severity]

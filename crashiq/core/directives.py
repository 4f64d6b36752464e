from __future__ import annotations

import logging

from crashiq.core.contract import (
    ACTION_DRIVABLE,
    ACTION_MINOR,
    ACTION_MODERATE,
    ACTION_NOT_DRIVABLE,
    ACTION_REVIEW,
    ACTION_SEVERE,
    ALERT_AIRBAG,
    ALERT_FACTORS_PREFIX,
    ALERT_OUTREACH_PENDING,
    ALERT_SPEEDING,
    ALERT_WEATHER_PREFIX,
    OUTREACH_CONFIRMED_OK,
)
from crashiq.core.models import (
    AccidentContext,
    Classification,
    DispatchDecision,
    ReportDirectives,
    Severity,
)

logger = logging.getLogger(__name__)

_SEVERITY_ACTIONS = {
    Severity.SEVERE: ACTION_SEVERE,
    Severity.MODERATE: ACTION_MODERATE,
    Severity.MINOR: ACTION_MINOR,
}


def recommended_actions(classification: Classification, dispatch: DispatchDecision) -> list[str]:
    # Order is priority: review, severity escalation, then services.
    actions = [ACTION_REVIEW]
    actions.extend(_SEVERITY_ACTIONS[classification.severity])
    actions.extend(ACTION_DRIVABLE if dispatch.vehicle_drivable else ACTION_NOT_DRIVABLE)
    return actions


def alerts_for(classification: Classification, context: AccidentContext | None = None) -> list[str]:
    ctx = context or AccidentContext()
    alerts: list[str] = []

    if classification.was_speeding:
        alerts.append(ALERT_SPEEDING)

    if classification.airbag_likely:
        alerts.append(ALERT_AIRBAG)

    if ctx.precipitation is not None:
        alerts.append(ALERT_WEATHER_PREFIX + ctx.precipitation)

    if ctx.contributing_factors:
        alerts.append(ALERT_FACTORS_PREFIX + ", ".join(ctx.contributing_factors))

    if ctx.outreach_status is not None and ctx.outreach_status != OUTREACH_CONFIRMED_OK:
        alerts.append(ALERT_OUTREACH_PENDING)

    return alerts


def compile_directives(
    classification: Classification,
    dispatch: DispatchDecision,
    context: AccidentContext | None = None,
) -> ReportDirectives:
    """
    Claim-handling directives for one accident.

    Missing context fields count as "condition absent", never as an error.
    """
    directives = ReportDirectives(
        recommended_actions=tuple(recommended_actions(classification, dispatch)),
        alerts=tuple(alerts_for(classification, context)),
    )
    logger.info(
        "Directives compiled: severity=%s, actions=%d, alerts=%d",
        classification.severity.value, len(directives.recommended_actions), len(directives.alerts),
    )
    return directives

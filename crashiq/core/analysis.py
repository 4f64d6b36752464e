from __future__ import annotations

import logging

from crashiq.core.config import DEFAULT_THRESHOLDS, Thresholds
from crashiq.core.contract import DEFAULT_NARRATIVE_TIMEOUT_SEC
from crashiq.core.impact import detect_impact_type
from crashiq.core.models import Classification, TelemetrySample
from crashiq.core.narrative import NarrativeDelegate, generate_narrative
from crashiq.core.scoring import airbag_likely, estimate_confidence, was_speeding
from crashiq.core.severity import classify_severity

logger = logging.getLogger(__name__)


def analyze_impact(
    sample: TelemetrySample,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
    *,
    delegate: NarrativeDelegate | None = None,
    timeout_sec: float = DEFAULT_NARRATIVE_TIMEOUT_SEC,
) -> Classification:
    """
    Classify one accident event: severity, impact type, heuristics,
    confidence and narrative.

    Everything except the optional narrative delegate is a pure function of
    the sample and thresholds.
    """
    logger.info(
        "Analyzing impact: gForce=%s, speed=%s, accel=[%s,%s,%s]",
        sample.g_force, sample.speed_mph, sample.accel_x, sample.accel_y, sample.accel_z,
    )

    severity = classify_severity(sample.g_force, sample.speed_mph, thresholds)
    impact_type = detect_impact_type(sample.accel_x, sample.accel_y, sample.accel_z)
    speeding = was_speeding(sample.speed_mph, sample.speed_limit_mph)
    airbag = airbag_likely(sample.g_force, severity)
    confidence = estimate_confidence(sample.g_force, sample.accel_x, sample.accel_y, sample.accel_z)

    narrative = generate_narrative(
        severity,
        impact_type,
        sample.g_force,
        sample.speed_mph,
        sample.speed_limit_mph,
        speeding,
        airbag,
        sample.accel_x,
        sample.accel_y,
        sample.accel_z,
        delegate=delegate,
        timeout_sec=timeout_sec,
    )

    logger.info(
        "Impact analysis complete: severity=%s, type=%s, confidence=%s",
        severity.value, impact_type.value, confidence,
    )

    return Classification(
        severity=severity,
        impact_type=impact_type,
        estimated_speed=sample.speed_mph,
        was_speeding=speeding,
        airbag_likely=airbag,
        confidence=confidence,
        narrative=narrative,
    )

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from crashiq.core.analysis import analyze_impact
from crashiq.core.config import CrashIQConfig
from crashiq.core.directives import compile_directives
from crashiq.core.dispatch import dispatch_for
from crashiq.core.ingest import context_from_row
from crashiq.core.models import (
    AccidentContext,
    Classification,
    DispatchDecision,
    ReportDirectives,
    Severity,
    TelemetrySample,
)
from crashiq.core.narrative import NarrativeDelegate
from crashiq.core.scoring import is_accident_detected

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = [
    "event_id",
    "severity",
    "impact_type",
    "confidence",
    "speed_mph",
    "was_speeding",
    "airbag_likely",
    "drivable",
    "services",
    "alerts",
]


@dataclass(frozen=True)
class EventAssessment:
    event_id: str
    sample: TelemetrySample
    classification: Classification
    dispatch: DispatchDecision
    directives: ReportDirectives

    def to_dict(self) -> dict:
        return {
            "event_id": self.event_id,
            "classification": self.classification.to_dict(),
            "dispatch": self.dispatch.to_dict(),
            "directives": self.directives.to_dict(),
        }


@dataclass(frozen=True)
class BatchResult:
    assessments: list[EventAssessment]
    notes: list[str]


def assess_event(
    event_id: str,
    sample: TelemetrySample,
    context: AccidentContext | None,
    cfg: CrashIQConfig,
    delegate: NarrativeDelegate | None = None,
) -> EventAssessment:
    classification = analyze_impact(
        sample,
        cfg.thresholds,
        delegate=delegate,
        timeout_sec=cfg.narrative_timeout_sec,
    )
    dispatch = dispatch_for(classification.severity)
    directives = compile_directives(classification, dispatch, context)
    return EventAssessment(
        event_id=str(event_id),
        sample=sample,
        classification=classification,
        dispatch=dispatch,
        directives=directives,
    )


def assess_frame(
    df: pd.DataFrame,
    cfg: CrashIQConfig,
    delegate: NarrativeDelegate | None = None,
) -> BatchResult:
    """
    Assess every accident row of an ingested events frame.

    Rows below the detection threshold are skipped unless cfg.include_all.
    """
    assessments: list[EventAssessment] = []
    notes: list[str] = []
    skipped: list[str] = []

    for row in df.to_dict(orient="records"):
        event_id = str(row["event_id"])
        sample = TelemetrySample(
            g_force=float(row["g_force"]),
            speed_mph=float(row["speed_mph"]),
            speed_limit_mph=int(row["speed_limit_mph"]),
            accel_x=float(row["accel_x"]),
            accel_y=float(row["accel_y"]),
            accel_z=float(row["accel_z"]),
        )

        if not cfg.include_all and not is_accident_detected(sample.g_force, cfg.detection_g):
            logger.debug("Event %s: g-force=%.2f below %.2f threshold, skipping", event_id, sample.g_force, cfg.detection_g)
            skipped.append(event_id)
            continue

        assessments.append(assess_event(event_id, sample, context_from_row(row), cfg, delegate))

    if skipped:
        notes.append(
            f"{len(skipped)} events below {cfg.detection_g:.1f} g detection threshold skipped: {', '.join(skipped)}"
        )

    logger.info("Assessed %d events (%d skipped)", len(assessments), len(skipped))
    return BatchResult(assessments=assessments, notes=notes)


def batch_summary(assessments: list[EventAssessment]) -> pd.DataFrame:
    if not assessments:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    rows = []
    for a in assessments:
        c = a.classification
        rows.append(
            {
                "event_id": a.event_id,
                "severity": c.severity.value,
                "impact_type": c.impact_type.value,
                "confidence": c.confidence,
                "speed_mph": c.estimated_speed,
                "was_speeding": c.was_speeding,
                "airbag_likely": c.airbag_likely,
                "drivable": a.dispatch.vehicle_drivable,
                "services": ", ".join(s.value for s in a.dispatch.ordered_categories()),
                "alerts": len(a.directives.alerts),
            }
        )

    df = pd.DataFrame(rows)

    rank = {s.value: s.rank for s in Severity}
    df["_r"] = -df["severity"].map(rank).fillna(-1)
    df = (
        df.sort_values(["_r", "confidence", "event_id"], ascending=[True, False, True], kind="stable")
          .drop(columns="_r")
          .reset_index(drop=True)
    )
    return df[SUMMARY_COLUMNS]


def severity_counts(summary: pd.DataFrame) -> dict[str, int]:
    counts = {s.value: 0 for s in Severity}
    if summary.empty:
        return counts
    for sev, n in summary["severity"].value_counts().items():
        counts[str(sev)] = int(n)
    return counts


def batch_verdict(summary: pd.DataFrame) -> str:
    if summary.empty:
        return "No accident events to assess."

    severe = summary.loc[summary["severity"] == Severity.SEVERE.value, "event_id"].tolist()
    moderate = summary.loc[summary["severity"] == Severity.MODERATE.value, "event_id"].tolist()
    minor = summary.loc[summary["severity"] == Severity.MINOR.value, "event_id"].tolist()
    airbag = int(np.count_nonzero(summary["airbag_likely"].to_numpy(dtype=bool)))

    parts: list[str] = []
    if severe:
        parts.append(f"{', '.join(map(str, severe))} severe; tow and medical dispatch required")
    if moderate:
        parts.append(f"{', '.join(map(str, moderate))} moderate; tow recommended")
    if minor:
        parts.append(f"{', '.join(map(str, minor))} minor; vehicle likely drivable")
    if airbag:
        parts.append(f"{airbag} with likely airbag deployment")

    return ". ".join(parts) + "."

from __future__ import annotations

from pathlib import Path

from crashiq.core.batch import EventAssessment
from crashiq.core.interpretation import interpret_impact


def _section(title: str) -> list[str]:
    return [title, "=" * max(len(title), 16)]


def render_claim_summary(assessment: EventAssessment) -> str:
    """
    Plain-text adjuster summary for one event: impact analysis,
    dispatch decision, recommended actions and alerts.
    """
    c = assessment.classification
    d = assessment.dispatch
    s = assessment.sample
    interp = interpret_impact(c.impact_type)

    lines: list[str] = [f"ACCIDENT EVENT {assessment.event_id}", ""]

    lines += _section("IMPACT ANALYSIS")
    lines += [
        f"Severity: {c.severity.value}",
        f"Impact Type: {c.impact_type.value} ({interp['pattern']})",
        f"Speed at Impact: {c.estimated_speed:.0f} mph (limit: {s.speed_limit_mph} mph)",
        f"G-Force: {s.g_force:.1f} g",
        f"Speeding: {'Yes' if c.was_speeding else 'No'}",
        f"Airbag Likely: {'Yes' if c.airbag_likely else 'No'}",
        f"Confidence: {c.confidence:.2f}",
        "",
        "Narrative:",
        c.narrative,
        "",
    ]

    lines += _section("DISPATCH")
    lines += [
        f"Vehicle Drivable: {'Yes' if d.vehicle_drivable else 'No'}",
        f"Services: {', '.join(x.value for x in d.ordered_categories())}",
        f"Dispatch Recommendation: {d.recommendation}",
        "",
    ]

    lines += _section("RECOMMENDED ACTIONS")
    lines += [f"- {a}" for a in assessment.directives.recommended_actions]

    if assessment.directives.alerts:
        lines.append("")
        lines += _section("ALERTS")
        lines += [f"- {a}" for a in assessment.directives.alerts]

    return "\n".join(lines) + "\n"


def write_text_report(out_path: str | Path, assessments: list[EventAssessment]) -> Path:
    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text("\n\n".join(render_claim_summary(a) for a in assessments), encoding="utf-8")
    return p

from __future__ import annotations

from pathlib import Path

import pandas as pd
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from crashiq.core.batch import EventAssessment
from crashiq.core.interpretation import interpret_impact


def _fmt_conf(x) -> str:
    if x is None or (isinstance(x, float) and pd.isna(x)):
        return "N/A"
    try:
        return f"{float(x):.2f}"
    except (TypeError, ValueError):
        return "N/A"


def _wrap_lines(c: canvas.Canvas, text: str, max_width: float, font_name: str, font_size: int) -> list[str]:
    c.setFont(font_name, font_size)
    words = (text or "").split()
    if not words:
        return [""]

    lines: list[str] = []
    current = words[0]
    for w in words[1:]:
        test = f"{current} {w}"
        if c.stringWidth(test, font_name, font_size) <= max_width:
            current = test
        else:
            lines.append(current)
            current = w
    lines.append(current)
    return lines


def _draw_wrapped(
    c: canvas.Canvas,
    x: float,
    y: float,
    text: str,
    max_width: float,
    line_height: int = 13,
    font_name: str = "Helvetica",
    font_size: int = 10,
) -> float:
    lines = _wrap_lines(c, text, max_width, font_name, font_size)
    c.setFont(font_name, font_size)
    for line in lines:
        c.drawString(x, y, line)
        y -= line_height
    return y


def _draw_confidence_bar(c: canvas.Canvas, x: float, y: float, w: float, h: float, value: float | None) -> None:
    """Outlined 0..1 bar, filled up to value."""
    if value is None:
        return
    v = max(0.0, min(1.0, float(value)))
    c.setLineWidth(0.5)
    c.rect(x, y - 1, w, h, stroke=1, fill=0)
    if v > 0:
        c.rect(x, y - 1, w * v, h, stroke=0, fill=1)


def _draw_footer(
    c: canvas.Canvas,
    page_w: float,
    y: float,
    text: str,
    left: float,
    right: float,
) -> None:
    c.setFont("Helvetica", 8)
    c.drawRightString(page_w - right, y, text)
    c.drawString(left, y, "CrashIQ · Accident Triage")


def write_pdf_report(
    out_path: str | Path,
    summary_df: pd.DataFrame,
    verdict: str,
    counts: dict[str, int],
    assessments: list[EventAssessment],
    generated_at: str | None,
    coverage_line: str | None,
    notes: list[str] | None = None,
    run_config: dict | None = None,
) -> Path:

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    c = canvas.Canvas(str(out_path), pagesize=letter)
    page_w, page_h = letter

    left = 34
    right = 44
    max_width = page_w - left - right

    # Column widths sum to 520 (< max_width 534)
    COL_W = {
        "event": 70,
        "sev": 64,
        "impact": 64,
        "conf": 70,
        "speed": 46,
        "flags": 60,
        "services": 146,
    }
    order = ["event", "sev", "impact", "conf", "speed", "flags", "services"]
    X = {}
    x = left
    for k in order:
        X[k] = x
        x += COL_W[k]

    footer_text = f"Generated {generated_at}" if generated_at else ""

    # ======================
    # PAGE 1 - BATCH OVERVIEW
    # ======================
    y = page_h - 60
    c.setFont("Helvetica-Bold", 18)
    c.drawString(left, y, "CrashIQ — Accident Triage Overview")
    y -= 26

    c.setFont("Helvetica", 10)
    if generated_at:
        c.drawString(left, y, f"Generated: {generated_at}")
        y -= 14
    if coverage_line:
        y = _draw_wrapped(c, left, y, coverage_line, max_width, line_height=12)
        y -= 6

    if run_config:
        thr = run_config.get("thresholds") or {}
        parts = [f"{k}: {v}" for k, v in thr.items()]
        if run_config.get("version"):
            parts.append(f"Version: {run_config['version']}")
        if parts:
            c.setFont("Helvetica-Bold", 10)
            c.drawString(left, y, "Run Configuration")
            y -= 12
            y = _draw_wrapped(c, left, y, " | ".join(parts), max_width, line_height=12)
            y -= 6

    y -= 6
    c.setFont("Helvetica-Bold", 12)
    c.drawString(left, y, "Batch Verdict")
    y -= 16
    y = _draw_wrapped(c, left, y, verdict, max_width, line_height=14, font_size=11)
    y -= 8

    count_line = "  |  ".join(f"{k}: {v}" for k, v in counts.items())
    y = _draw_wrapped(c, left, y, count_line, max_width, line_height=14, font_size=11)
    y -= 12

    # Table header
    c.setFont("Helvetica-Bold", 9)
    c.drawString(X["event"], y, "Event")
    c.drawString(X["sev"], y, "Severity")
    c.drawString(X["impact"], y, "Impact")
    c.drawString(X["conf"], y, "Confidence")
    c.drawString(X["speed"], y, "Speed")
    c.drawString(X["flags"], y, "Flags")
    c.drawString(X["services"], y, "Services")
    y -= 14

    c.setFont("Helvetica", 9)
    if summary_df.empty:
        c.drawString(left, y, "No accident events to assess.")
        y -= 14
    else:
        for _, r in summary_df.iterrows():
            if y < 96:
                _draw_footer(c, page_w, 24, footer_text, left, right)
                c.showPage()
                y = page_h - 60
                c.setFont("Helvetica-Bold", 12)
                c.drawString(left, y, "CrashIQ — Accident Triage Overview (cont.)")
                y -= 24
                c.setFont("Helvetica", 9)

            sev = str(r["severity"])
            if sev == "SEVERE":
                c.setFont("Helvetica-Bold", 9)
                c.drawString(X["event"], y, f"! {r['event_id']}")
                c.setFont("Helvetica", 9)
            else:
                c.drawString(X["event"], y, str(r["event_id"]))

            c.drawString(X["sev"], y, sev)
            c.drawString(X["impact"], y, str(r["impact_type"]))
            c.drawString(X["conf"], y, _fmt_conf(r["confidence"]))
            _draw_confidence_bar(c, X["conf"] + 26, y, COL_W["conf"] - 34, 7, r["confidence"])
            c.drawString(X["speed"], y, f"{float(r['speed_mph']):.0f}")

            flags = []
            if bool(r["was_speeding"]):
                flags.append("SPD")
            if bool(r["airbag_likely"]):
                flags.append("BAG")
            c.drawString(X["flags"], y, " ".join(flags) or "-")

            y_services = _draw_wrapped(
                c, X["services"], y, str(r["services"]),
                max_width=COL_W["services"], line_height=11, font_size=9,
            )
            y = min(y - 14, y_services - 3)

    _draw_footer(c, page_w, 24, footer_text, left, right)

    # ==========================
    # EVENT DETAIL PAGES
    # ==========================
    c.showPage()
    y = page_h - 60
    c.setFont("Helvetica-Bold", 16)
    c.drawString(left, y, "Event Details")
    y -= 28

    for a in assessments:
        cl = a.classification
        interp = interpret_impact(cl.impact_type)

        if y < 220:
            _draw_footer(c, page_w, 24, footer_text, left, right)
            c.showPage()
            y = page_h - 60

        c.setFont("Helvetica-Bold", 12)
        c.drawString(left, y, f"Event {a.event_id}  {cl.severity.value} {cl.impact_type.value}")
        y -= 16

        y = _draw_wrapped(
            c, left + 12, y,
            f"Pattern: {interp['pattern']}. {interp['meaning']} Risk: {interp['risk_type']}.",
            max_width - 12, line_height=12, font_size=9,
        )
        y = _draw_wrapped(c, left + 12, y, f"Narrative: {cl.narrative}", max_width - 12, line_height=12, font_size=9)
        y = _draw_wrapped(
            c, left + 12, y, f"Dispatch: {a.dispatch.recommendation}", max_width - 12, line_height=12, font_size=9
        )

        c.setFont("Helvetica-Bold", 9)
        c.drawString(left + 12, y, "Recommended actions")
        y -= 12
        for action in a.directives.recommended_actions:
            y = _draw_wrapped(c, left + 24, y, f"- {action}", max_width - 24, line_height=11, font_size=9)

        if a.directives.alerts:
            c.setFont("Helvetica-Bold", 9)
            c.drawString(left + 12, y, "Alerts")
            y -= 12
            for alert in a.directives.alerts:
                y = _draw_wrapped(c, left + 24, y, f"! {alert}", max_width - 24, line_height=11, font_size=9)

        c.setLineWidth(0.3)
        c.line(left, y + 4, page_w - right, y + 4)
        y -= 16

    if not assessments:
        c.setFont("Helvetica", 10)
        c.drawString(left, y, "No accident events to assess.")
        y -= 14

    if notes:
        if y < 120:
            _draw_footer(c, page_w, 24, footer_text, left, right)
            c.showPage()
            y = page_h - 60
        y -= 8
        c.setFont("Helvetica-Bold", 12)
        c.drawString(left, y, "Data Notes")
        y -= 14
        for n in notes:
            y = _draw_wrapped(c, left, y, f"- {n}", max_width, line_height=13)

    _draw_footer(
        c,
        page_w,
        24,
        f"Version {run_config.get('version', '')}" if run_config else footer_text,
        left,
        right,
    )

    c.save()
    return out_path

from __future__ import annotations

import argparse
import logging
from datetime import datetime
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any

from crashiq.core.batch import assess_frame, batch_summary, batch_verdict, severity_counts
from crashiq.core.config import load_config, merge_config
from crashiq.core.contract import CRASHIQ_DECISION_VERSION
from crashiq.core.ingest import load_events_csv
from crashiq.core.narrative import GeminiNarrativeDelegate
from crashiq.logging_config import configure_logging
from crashiq.report.json_report import write_json_report
from crashiq.report.pdf_report import write_pdf_report
from crashiq.report.text_report import write_text_report
from crashiq.schema_constants import SCHEMA_VERSION

# Keep naming explicit: package version (--version) vs decision contract version (reports).
try:
    CRASHIQ_PACKAGE_VERSION = version("crashiq")
except PackageNotFoundError:
    CRASHIQ_PACKAGE_VERSION = CRASHIQ_DECISION_VERSION

logger = logging.getLogger(__name__)


def _console_safe(s: str) -> str:
    """
    Windows consoles can choke on some Unicode chars.
    Keep console output ASCII-safe while leaving report files untouched.
    """
    return str(s).replace("—", "-").replace("·", "-").replace("→", "->")


def _require_existing_file(path: Path, label: str) -> None:
    if not path.exists():
        raise FileNotFoundError(f"{label} not found: {path}")
    if path.is_dir():
        raise IsADirectoryError(f"{label} is a directory, expected a file: {path}")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="crashiq", description="CrashIQ - Accident severity triage and dispatch")

    p.add_argument("--input", default=None, help="Path to accident events CSV (defaults from config or built-in)")
    p.add_argument("--out", default=None, help="Output PDF path (defaults from config or built-in)")
    p.add_argument(
        "--json-out",
        "--json",
        dest="json_out",
        default=None,
        help="JSON report output path",
    )
    p.add_argument("--summary-out", default=None, help="Optional plain-text adjuster summary path")
    p.add_argument("--config", default=None, help="Path to config TOML (optional)")

    # classification thresholds
    p.add_argument("--severe-g", type=float, default=None, help="G-force at or above which an impact is SEVERE")
    p.add_argument("--moderate-g", type=float, default=None, help="G-force at or above which an impact is MODERATE")
    p.add_argument("--severe-speed", type=float, default=None, help="Speed (mph) at or above which an impact is SEVERE")
    p.add_argument(
        "--moderate-speed", type=float, default=None, help="Speed (mph) at or above which an impact is MODERATE"
    )

    # batch selection
    p.add_argument("--detection-g", type=float, default=None, help="Minimum g-force treated as an accident")
    p.add_argument("--include-all", action="store_true", default=None,
                   help="Assess every row, even below the detection threshold")

    # narrative
    p.add_argument("--llm", dest="llm_enabled", action="store_true", default=None,
                   help="Ask Gemini for incident narratives (falls back to template text)")
    p.add_argument("--narrative-timeout", type=float, default=None, help="Seconds to wait for a narrative")

    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR (default: CRASHIQ_LOG_LEVEL)")
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {CRASHIQ_PACKAGE_VERSION} (decision contract {CRASHIQ_DECISION_VERSION})",
    )

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.log_level)

    # Load file config (optional). load_config returns defaults if None/missing.
    file_cfg = load_config(args.config)

    # Only keys the user actually provided override the file config
    cli_explicit: dict[str, Any] = {
        "input": args.input,
        "out": args.out,
        "json_out": args.json_out,
        "summary_out": args.summary_out,
        "severe_g": args.severe_g,
        "moderate_g": args.moderate_g,
        "severe_speed": args.severe_speed,
        "moderate_speed": args.moderate_speed,
        "detection_g": args.detection_g,
        "include_all": args.include_all,
        "llm_enabled": args.llm_enabled,
        "narrative_timeout_sec": args.narrative_timeout,
    }
    cfg = merge_config(file_cfg, cli_explicit)

    data_path = Path(cfg.input)
    out_pdf = Path(cfg.out)
    json_out_path = Path(cfg.json_out)
    summary_path = Path(cfg.summary_out) if cfg.summary_out else None

    # ---- Fail fast: missing input should be explicit ----
    try:
        _require_existing_file(data_path, "Input CSV")
    except (FileNotFoundError, IsADirectoryError) as e:
        print(f"ERROR: {e}")
        return 2

    ingest = load_events_csv(data_path)
    if ingest.df.empty:
        print(f"ERROR: input CSV parsed to 0 rows: {data_path}")
        if ingest.issues:
            print("Ingest issues:")
            for msg in ingest.issues:
                print(f" - {_console_safe(msg)}")
        return 1

    delegate = GeminiNarrativeDelegate(model=cfg.llm_model) if cfg.llm_enabled else None
    if delegate is not None:
        logger.info("Narratives via %s (timeout %.1fs)", cfg.llm_model, cfg.narrative_timeout_sec)

    result = assess_frame(ingest.df, cfg, delegate=delegate)
    summary_df = batch_summary(result.assessments)
    verdict = batch_verdict(summary_df)
    counts = severity_counts(summary_df)
    notes = [*ingest.issues, *result.notes]

    generated_at = datetime.now().strftime("%Y-%m-%d %H:%M")
    coverage = (
        f"Events: {len(ingest.df)} | Assessed: {len(result.assessments)} | "
        f"Detection threshold: {cfg.detection_g:.1f} g{' (all rows)' if cfg.include_all else ''}"
    )

    run_config = {
        "version": CRASHIQ_DECISION_VERSION,
        "schema": SCHEMA_VERSION,
        "thresholds": cfg.thresholds.to_dict(),
    }

    write_json_report(
        out_path=json_out_path,
        generated_at=generated_at,
        coverage_line=coverage,
        verdict=verdict,
        counts=counts,
        summary_df=summary_df,
        assessments=result.assessments,
        notes=notes,
        run_config=run_config,
    )

    write_pdf_report(
        out_path=out_pdf,
        summary_df=summary_df,
        verdict=verdict,
        counts=counts,
        assessments=result.assessments,
        generated_at=generated_at,
        coverage_line=coverage,
        notes=notes,
        run_config=run_config,
    )

    if summary_path is not None:
        write_text_report(summary_path, result.assessments)

    # Prints only at main
    print(f"Report generated: {out_pdf.resolve()}")
    print(f"JSON saved:       {json_out_path.resolve()}")
    if summary_path is not None:
        print(f"Summary saved:    {summary_path.resolve()}")
    print(f"Batch Verdict:    {_console_safe(verdict)}")
    print("Counts:           " + " | ".join(f"{k}: {v}" for k, v in counts.items()))

    if notes:
        print("Notes:")
        for n in notes:
            print(f" - {_console_safe(n)}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

import pandas as pd

from crashiq.core.batch import EventAssessment


def _json_safe(x: Any) -> Any:
    """
    Convert values into strict JSON-safe Python types.

    Guarantees:
    - No NaN / Infinity (converted to None)
    - pandas/numpy NA -> None
    - numpy scalars -> python primitives
    - Enums -> their value
    - Recurses through dict/list/tuple
    """
    if isinstance(x, dict):
        return {str(k): _json_safe(v) for k, v in x.items()}

    if isinstance(x, (list, tuple, set, frozenset)):
        return [_json_safe(v) for v in x]

    # str-valued enums are str instances; unwrap to the plain value
    if isinstance(x, str):
        return str(getattr(x, "value", x))

    try:
        if pd.isna(x):
            return None
    except (TypeError, ValueError):
        pass

    if isinstance(x, float):
        if math.isnan(x) or math.isinf(x):
            return None
        return x

    # bool before the numpy .item() branch (numpy bools have .item too)
    if isinstance(x, (int, bool)) or x is None:
        return x

    if hasattr(x, "item") and callable(x.item):
        try:
            return _json_safe(x.item())
        except (TypeError, ValueError):
            pass

    return str(x)


def _df_to_records(df: pd.DataFrame) -> list[dict[str, Any]]:
    if df is None or df.empty:
        return []
    return [_json_safe(r) for r in df.to_dict(orient="records")]


def build_report_payload(
    *,
    generated_at: str | None,
    coverage_line: str | None,
    verdict: str,
    counts: dict[str, int],
    summary_df: pd.DataFrame,
    assessments: list[EventAssessment],
    notes: list[str] | None,
    run_config: dict[str, Any] | None,
) -> dict[str, Any]:
    run_config = run_config or {}
    payload: dict[str, Any] = {
        "meta": {
            "generated_at": generated_at,
            "coverage": coverage_line,
            "decision_version": run_config.get("version"),
            "schema_version": run_config.get("schema"),
            "thresholds": run_config.get("thresholds", {}),
        },
        "batch": {
            "verdict": verdict,
            "counts": counts,
            "table": _df_to_records(summary_df),
        },
        "events": [a.to_dict() for a in assessments],
        "notes": notes or [],
    }
    return _json_safe(payload)


def write_json_report(
    out_path: str | Path,
    *,
    generated_at: str | None,
    coverage_line: str | None,
    verdict: str,
    counts: dict[str, int],
    summary_df: pd.DataFrame,
    assessments: list[EventAssessment],
    notes: list[str] | None,
    run_config: dict[str, Any] | None,
) -> Path:
    """
    Writes the canonical CrashIQ JSON report.

    IMPORTANT:
    - `meta` must remain schema-stable; the schema forbids extra keys there.
    """
    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)

    payload = build_report_payload(
        generated_at=generated_at,
        coverage_line=coverage_line,
        verdict=verdict,
        counts=counts,
        summary_df=summary_df,
        assessments=assessments,
        notes=notes,
        run_config=run_config,
    )

    # STRICT JSON: no NaN allowed
    p.write_text(
        json.dumps(payload, indent=2, sort_keys=False, allow_nan=False),
        encoding="utf-8",
    )
    return p

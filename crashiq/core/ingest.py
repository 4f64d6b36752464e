from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import pandas as pd

from crashiq.core.models import AccidentContext, TelemetrySample


REQUIRED_COLUMNS = [
    "event_id",
    "g_force",
    "speed_mph",
    "speed_limit_mph",
    "accel_x",
    "accel_y",
    "accel_z",
]

CONTEXT_COLUMNS = ["precipitation", "contributing_factors", "outreach_status"]

NUMERIC_COLUMNS = ["g_force", "speed_mph", "speed_limit_mph", "accel_x", "accel_y", "accel_z"]

# AccidentEvent field name -> TelemetrySample field name
_EVENT_KEYS = {
    "g_force": ("gForce", "g_force"),
    "speed_mph": ("speedMph", "speed_mph"),
    "speed_limit_mph": ("speedLimitMph", "speed_limit_mph"),
    "accel_x": ("accelerometerX", "accelerometer_x", "accel_x"),
    "accel_y": ("accelerometerY", "accelerometer_y", "accel_y"),
    "accel_z": ("accelerometerZ", "accelerometer_z", "accel_z"),
}


@dataclass(frozen=True)
class IngestResult:
    df: pd.DataFrame
    issues: list[str]


def load_events_csv(path: str | Path) -> IngestResult:
    """
    Load accident-event CSV (one row per event) and validate basic schema.

    Required columns:
    event_id, g_force, speed_mph, speed_limit_mph, accel_x, accel_y, accel_z

    Optional context columns:
    precipitation, contributing_factors (';'-separated), outreach_status
    """
    path = Path(path)
    issues: list[str] = []

    if not path.exists():
        return IngestResult(df=pd.DataFrame(), issues=[f"File not found: {path}"])

    df = pd.read_csv(path, dtype={"event_id": str}, keep_default_na=True)

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        issues.append(f"Missing required columns: {missing}")
        return IngestResult(df=pd.DataFrame(), issues=issues)

    # Coerce numerics
    for col in NUMERIC_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce")

    bad_nums = int(df[NUMERIC_COLUMNS].isna().any(axis=1).sum())
    if bad_nums:
        issues.append(f"{bad_nums} rows have invalid numeric telemetry")

    # Context columns are optional; absent means "condition absent"
    for col in CONTEXT_COLUMNS:
        if col not in df.columns:
            df[col] = None

    df["event_id"] = df["event_id"].astype("string").str.strip().replace("", pd.NA)

    # Drop rows missing essentials (strict for v1)
    df = df.dropna(subset=["event_id", *NUMERIC_COLUMNS]).copy()
    df["speed_limit_mph"] = df["speed_limit_mph"].round().astype(int)

    return IngestResult(df=df.reset_index(drop=True), issues=issues)


def _lookup(event: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for k in keys:
        if k in event and event[k] is not None:
            return event[k]
    raise KeyError(keys[0])


def sample_from_event(event: Mapping[str, Any]) -> TelemetrySample:
    """
    Build a TelemetrySample from an AccidentEvent-shaped mapping.

    Accepts camelCase (gForce, accelerometerX, ...) or snake_case keys.
    Identifiers, location and device telemetry are ignored.
    """
    return TelemetrySample(
        g_force=float(_lookup(event, _EVENT_KEYS["g_force"])),
        speed_mph=float(_lookup(event, _EVENT_KEYS["speed_mph"])),
        speed_limit_mph=int(_lookup(event, _EVENT_KEYS["speed_limit_mph"])),
        accel_x=float(_lookup(event, _EVENT_KEYS["accel_x"])),
        accel_y=float(_lookup(event, _EVENT_KEYS["accel_y"])),
        accel_z=float(_lookup(event, _EVENT_KEYS["accel_z"])),
    )


def _clean_opt_str(x: Any) -> str | None:
    if x is None:
        return None
    try:
        if pd.isna(x):
            return None
    except (TypeError, ValueError):
        pass
    s = str(x).strip()
    return s or None


def context_from_row(row: Mapping[str, Any]) -> AccidentContext:
    """Optional context from a CSV row; blank cells are treated as absent."""
    factors_raw = _clean_opt_str(row.get("contributing_factors"))
    factors = None
    if factors_raw is not None:
        factors = tuple(f.strip() for f in factors_raw.split(";") if f.strip())

    return AccidentContext(
        precipitation=_clean_opt_str(row.get("precipitation")),
        contributing_factors=factors,
        outreach_status=_clean_opt_str(row.get("outreach_status")),
    )

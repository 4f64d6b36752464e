from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from crashiq.core.ingest import context_from_row, load_events_csv, sample_from_event
from crashiq.core.models import AccidentContext, TelemetrySample


def test_load_events_csv_happy_path(events_csv: Path) -> None:
    res = load_events_csv(events_csv)
    assert res.issues == []
    assert len(res.df) == 4
    assert res.df["speed_limit_mph"].dtype.kind == "i"
    assert list(res.df["event_id"]) == ["EVT-A", "EVT-B", "EVT-C", "EVT-D"]


def test_missing_file_is_an_issue(tmp_path: Path) -> None:
    res = load_events_csv(tmp_path / "missing.csv")
    assert res.df.empty
    assert res.issues and "File not found" in res.issues[0]


def test_missing_required_columns(tmp_path: Path) -> None:
    p = tmp_path / "bad.csv"
    pd.DataFrame({"event_id": ["X"], "g_force": [3.0]}).to_csv(p, index=False)
    res = load_events_csv(p)
    assert res.df.empty
    assert "Missing required columns" in res.issues[0]


def test_rows_with_bad_numbers_or_blank_ids_are_dropped(tmp_path: Path) -> None:
    p = tmp_path / "events.csv"
    p.write_text(
        "event_id,g_force,speed_mph,speed_limit_mph,accel_x,accel_y,accel_z\n"
        "E1,4.2,35,35,-3.8,0.5,0.2\n"
        "E2,abc,35,35,-3.8,0.5,0.2\n"
        " ,4.0,30,35,-3.0,0.5,0.2\n",
        encoding="utf-8",
    )
    res = load_events_csv(p)
    assert list(res.df["event_id"]) == ["E1"]
    assert "1 rows have invalid numeric telemetry" in res.issues
    # optional context columns are added as empty
    assert {"precipitation", "contributing_factors", "outreach_status"} <= set(res.df.columns)


def test_sample_from_event_accepts_camel_case() -> None:
    event = {
        "id": "a-1",
        "gForce": 4.2,
        "speedMph": 35,
        "speedLimitMph": 35,
        "accelerometerX": -3.8,
        "accelerometerY": 0.5,
        "accelerometerZ": 0.2,
        "latitude": 41.9,
    }
    assert sample_from_event(event) == TelemetrySample(4.2, 35.0, 35, -3.8, 0.5, 0.2)


def test_sample_from_event_missing_field_raises() -> None:
    with pytest.raises(KeyError):
        sample_from_event({"gForce": 4.2})


def test_context_from_row_blank_cells_are_absent() -> None:
    assert context_from_row({"precipitation": float("nan"), "contributing_factors": "", "outreach_status": None}) == (
        AccidentContext()
    )
    ctx = context_from_row({"precipitation": " Snow ", "contributing_factors": "A; B;", "outreach_status": "PENDING"})
    assert ctx == AccidentContext(precipitation="Snow", contributing_factors=("A", "B"), outreach_status="PENDING")

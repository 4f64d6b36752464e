from __future__ import annotations

import json
from pathlib import Path

import jsonschema
import pytest

from crashiq.tools.validate_json import ReportContractError, StrictJsonError, validate_json


def test_bundled_schema_validates_sample_json(tmp_path: Path) -> None:
    # Minimal payload that must satisfy schema v1
    payload = {
        "meta": {
            "generated_at": "2026-01-01 00:00",
            "coverage": "Events: 0 | Assessed: 0",
            "decision_version": "dev",
            "schema_version": "v1",
        },
        "batch": {"verdict": "No accident events to assess.", "counts": {"MINOR": 0}, "table": []},
        "events": [],
        "notes": [],
    }

    out = tmp_path / "check.json"
    out.write_text(json.dumps(payload, allow_nan=False), encoding="utf-8")

    # If bundled schema exists, this will validate against it automatically.
    validate_json(out)

def _event(severity: str = "MODERATE", confidence: float = 0.9) -> dict:
    return {
        "event_id": "EVT-1",
        "classification": {
            "severity": severity,
            "impact_type": "FRONTAL",
            "estimated_speed": 35.0,
            "was_speeding": False,
            "airbag_likely": True,
            "confidence": confidence,
            "narrative": "Vehicle experienced moderate frontal impact.",
        },
        "dispatch": {
            "vehicle_drivable": False,
            "service_categories": ["BODY_SHOP", "TOW", "RENTAL"],
            "recommendation": "Tow recommended",
        },
        "directives": {"recommended_actions": ["Review claim within 24 hours"], "alerts": []},
    }


def _payload(events: list[dict]) -> dict:
    return {
        "meta": {
            "generated_at": None,
            "coverage": None,
            "decision_version": "0.1.0",
            "schema_version": "v1",
            "thresholds": {"severe_g": 5.0},
        },
        "batch": {"verdict": "x", "counts": {"MODERATE": 1}, "table": []},
        "events": events,
        "notes": [],
    }


def test_bundled_schema_accepts_event(tmp_path: Path) -> None:
    out = tmp_path / "check.json"
    out.write_text(json.dumps(_payload([_event()])), encoding="utf-8")
    assert validate_json(out).events == 1


def test_bundled_schema_rejects_unknown_severity(tmp_path: Path) -> None:
    out = tmp_path / "check.json"
    out.write_text(json.dumps(_payload([_event(severity="CATASTROPHIC")])), encoding="utf-8")
    with pytest.raises(jsonschema.ValidationError):
        validate_json(out)


def test_bundled_schema_rejects_confidence_above_one(tmp_path: Path) -> None:
    out = tmp_path / "check.json"
    out.write_text(json.dumps(_payload([_event(confidence=1.2)])), encoding="utf-8")
    with pytest.raises(jsonschema.ValidationError):
        validate_json(out)


def test_nan_is_rejected_before_schema(tmp_path: Path) -> None:
    out = tmp_path / "check.json"
    out.write_text(json.dumps(_payload([_event(confidence=float("nan"))])), encoding="utf-8")
    with pytest.raises(StrictJsonError):
        validate_json(out)


def test_dispatch_that_contradicts_severity_is_rejected(tmp_path: Path) -> None:
    ev = _event()
    ev["dispatch"]["vehicle_drivable"] = True
    ev["dispatch"]["service_categories"] = ["BODY_SHOP"]
    out = tmp_path / "check.json"
    out.write_text(json.dumps(_payload([ev])), encoding="utf-8")
    with pytest.raises(ReportContractError, match="dispatch policy"):
        validate_json(out)


def test_counts_must_cover_every_event(tmp_path: Path) -> None:
    payload = _payload([_event(), _event()])
    out = tmp_path / "check.json"
    out.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(ReportContractError, match="batch.counts"):
        validate_json(out)

from __future__ import annotations

import argparse
import importlib.resources as resources
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema

from crashiq.core.contract import ACTION_REVIEW
from crashiq.core.dispatch import DISPATCH_POLICY
from crashiq.core.models import Severity
from crashiq.schema_constants import (
    SCHEMA_VERSION,
    SCHEMA_RESOURCE_PACKAGE,
    SCHEMA_RESOURCE_NAME,
)

EXPECTED_SCHEMA_VERSION = SCHEMA_VERSION


class StrictJsonError(ValueError):
    """Raised when a report is not strict JSON (syntax error, NaN/Infinity, non-object root)."""


class SchemaVersionMismatch(ValueError):
    """Raised when meta.schema_version is missing or not EXPECTED_SCHEMA_VERSION."""


class ReportContractError(ValueError):
    """Raised when a schema-valid report contradicts the dispatch/directive contract."""


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    schema_version: str
    events: int
    counts: dict[str, int] = field(default_factory=dict)


def _no_constants(name: str) -> Any:
    raise StrictJsonError(f"Forbidden JSON constant encountered: {name}")


def _load_schema_text() -> str:
    # Read from package resources so wheels and editable installs behave the same
    return resources.files(SCHEMA_RESOURCE_PACKAGE).joinpath(SCHEMA_RESOURCE_NAME).read_text(encoding="utf-8")


def _loads_object(text: str, what: str) -> dict[str, Any]:
    try:
        obj = json.loads(text, parse_constant=_no_constants)
    except json.JSONDecodeError as e:
        raise StrictJsonError(f"{what} is not valid JSON: {e.msg} (line {e.lineno}, col {e.colno})") from e
    if not isinstance(obj, dict):
        raise StrictJsonError(f"{what} must be a JSON object at top level.")
    return obj


def _schema_version_of(report: dict[str, Any]) -> str:
    meta = report.get("meta")
    version = meta.get("schema_version") if isinstance(meta, dict) else None
    if not isinstance(version, str) or not version.strip():
        raise SchemaVersionMismatch("Report has no meta.schema_version.")
    return version.strip()


def contract_problems(report: dict[str, Any]) -> list[str]:
    """
    Cross-field checks the JSON schema cannot express:
    counts agree with the events list, dispatch matches the severity policy,
    and every action list opens with the review step.
    """
    problems: list[str] = []
    events = report.get("events") or []
    batch = report.get("batch") or {}

    counts = batch.get("counts")
    if isinstance(counts, dict) and sum(counts.values()) != len(events):
        problems.append(f"batch.counts totals {sum(counts.values())} but {len(events)} events are listed")

    table = batch.get("table")
    if isinstance(table, list) and table and len(table) != len(events):
        problems.append(f"batch.table has {len(table)} rows for {len(events)} events")

    for ev in events:
        eid = ev.get("event_id", "?")
        severity = Severity(ev["classification"]["severity"])
        expected = DISPATCH_POLICY[severity]
        dispatch = ev["dispatch"]

        if dispatch["vehicle_drivable"] != expected.vehicle_drivable:
            problems.append(f"{eid}: vehicle_drivable disagrees with {severity.value} dispatch policy")
        if set(dispatch["service_categories"]) != {c.value for c in expected.service_categories}:
            problems.append(f"{eid}: service categories disagree with {severity.value} dispatch policy")

        actions = ev["directives"]["recommended_actions"]
        if actions and actions[0] != ACTION_REVIEW:
            problems.append(f"{eid}: first recommended action must be '{ACTION_REVIEW}'")

    return problems


def validate_json(path: str | Path, *, expected_schema_version: str = EXPECTED_SCHEMA_VERSION) -> ValidationResult:
    """
    Validate a CrashIQ report JSON file in four passes:
      1) strict JSON parse (no NaN/Infinity)
      2) meta.schema_version locked to the expected version
      3) JSON Schema validation against the bundled schema
      4) dispatch/directive contract checks across fields
    """
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(str(p))

    report = _loads_object(p.read_text(encoding="utf-8"), str(p))

    actual = _schema_version_of(report)
    if actual != expected_schema_version:
        raise SchemaVersionMismatch(
            f"Schema version mismatch: expected '{expected_schema_version}', got '{actual}'."
        )

    jsonschema.validate(instance=report, schema=_loads_object(_load_schema_text(), "bundled schema"))

    problems = contract_problems(report)
    if problems:
        raise ReportContractError("; ".join(problems))

    events = report.get("events") or []
    counts = (report.get("batch") or {}).get("counts") or {}
    return ValidationResult(ok=True, schema_version=actual, events=len(events), counts=dict(counts))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Validate a CrashIQ JSON report.")
    parser.add_argument("path", help="Path to JSON report file")
    args = parser.parse_args(argv)

    try:
        result = validate_json(args.path)
    except (OSError, ValueError, jsonschema.ValidationError) as e:
        print(f"ERROR: {e}")
        raise SystemExit(1) from e

    tally = ", ".join(f"{k}={v}" for k, v in result.counts.items())
    print(f"OK: {result.events} events, schema {result.schema_version}" + (f" ({tally})" if tally else ""))
    raise SystemExit(0)


if __name__ == "__main__":
    main()

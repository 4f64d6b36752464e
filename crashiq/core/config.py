from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

try:
    import tomllib  # py3.11+
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from crashiq.core.contract import (
    DEFAULT_ACCIDENT_DETECTION_G,
    DEFAULT_LLM_MODEL,
    DEFAULT_MODERATE_G,
    DEFAULT_MODERATE_SPEED_MPH,
    DEFAULT_NARRATIVE_TIMEOUT_SEC,
    DEFAULT_SEVERE_G,
    DEFAULT_SEVERE_SPEED_MPH,
)


# ----------------------------
# Config objects
# ----------------------------

@dataclass(frozen=True)
class Thresholds:
    severe_g: float = DEFAULT_SEVERE_G
    moderate_g: float = DEFAULT_MODERATE_G
    severe_speed: float = DEFAULT_SEVERE_SPEED_MPH
    moderate_speed: float = DEFAULT_MODERATE_SPEED_MPH

    def to_dict(self) -> dict[str, float]:
        return {
            "severe_g": self.severe_g,
            "moderate_g": self.moderate_g,
            "severe_speed": self.severe_speed,
            "moderate_speed": self.moderate_speed,
        }


DEFAULT_THRESHOLDS = Thresholds()


@dataclass(frozen=True)
class CrashIQConfig:
    """
    Single, flattened config object used by the CLI/runtime.

    Supports a simple table:
      [crashiq]
      input, out, json_out, summary_out, detection_g, include_all

    plus structured tables:
      [thresholds]  severe_g, moderate_g, severe_speed, moderate_speed
      [narrative]   llm_enabled, model, timeout_sec
    """
    # IO
    input: str = "data/events.csv"
    out: str = "outputs/crashiq_report.pdf"
    json_out: str = "outputs/crashiq_report.json"
    summary_out: str | None = None

    # classification knobs
    thresholds: Thresholds = field(default_factory=Thresholds)
    detection_g: float = DEFAULT_ACCIDENT_DETECTION_G
    include_all: bool = False

    # narrative knobs
    llm_enabled: bool = False
    llm_model: str = DEFAULT_LLM_MODEL
    narrative_timeout_sec: float = DEFAULT_NARRATIVE_TIMEOUT_SEC


# ----------------------------
# Helpers
# ----------------------------

def _as_dict(x: Any) -> dict[str, Any]:
    return x if isinstance(x, dict) else {}


def _first(d: dict[str, Any], keys: tuple[str, ...], default: Any) -> Any:
    for k in keys:
        if k in d:
            return d[k]
    return default


def _coerce_float(x: Any, default: float) -> float:
    try:
        return float(x)
    except (TypeError, ValueError):
        return default


def _coerce_bool(x: Any, default: bool) -> bool:
    if isinstance(x, bool):
        return x
    if isinstance(x, str):
        s = x.strip().lower()
        if s in ("1", "true", "yes", "on"):
            return True
        if s in ("0", "false", "no", "off"):
            return False
    return default


def _coerce_str(x: Any, default: str) -> str:
    if x is None:
        return default
    s = str(x)
    return s if s.strip() else default


def _coerce_opt_str(x: Any) -> str | None:
    if x is None:
        return None
    s = str(x).strip()
    return s or None


# ----------------------------
# Load + merge
# ----------------------------

def load_config(path: str | Path | None) -> CrashIQConfig:
    """
    Load TOML config. If missing/None, returns safe defaults.
    Never raises for missing file (config is optional).
    """
    if not path:
        return CrashIQConfig()

    p = Path(path)
    if not p.exists():
        return CrashIQConfig()

    data = tomllib.loads(p.read_text(encoding="utf-8"))

    crash = _as_dict(data.get("crashiq", {}))
    thr = _as_dict(data.get("thresholds", {}))
    narr = _as_dict(data.get("narrative", {}))

    base = CrashIQConfig()
    dt = DEFAULT_THRESHOLDS

    # Accept both short names and the long property-style names
    thresholds = Thresholds(
        severe_g=_coerce_float(_first(thr, ("severe_g", "severe_g_force"), dt.severe_g), dt.severe_g),
        moderate_g=_coerce_float(_first(thr, ("moderate_g", "moderate_g_force"), dt.moderate_g), dt.moderate_g),
        severe_speed=_coerce_float(
            _first(thr, ("severe_speed", "severe_speed_delta"), dt.severe_speed), dt.severe_speed
        ),
        moderate_speed=_coerce_float(
            _first(thr, ("moderate_speed", "moderate_speed_delta"), dt.moderate_speed), dt.moderate_speed
        ),
    )

    return CrashIQConfig(
        input=_coerce_str(crash.get("input"), base.input),
        out=_coerce_str(crash.get("out"), base.out),
        json_out=_coerce_str(crash.get("json_out"), base.json_out),
        summary_out=_coerce_opt_str(crash.get("summary_out")),
        thresholds=thresholds,
        detection_g=_coerce_float(crash.get("detection_g", base.detection_g), base.detection_g),
        include_all=_coerce_bool(crash.get("include_all"), base.include_all),
        llm_enabled=_coerce_bool(_first(narr, ("llm_enabled", "enabled"), None), base.llm_enabled),
        llm_model=_coerce_str(narr.get("model"), base.llm_model),
        narrative_timeout_sec=_coerce_float(
            narr.get("timeout_sec", base.narrative_timeout_sec), base.narrative_timeout_sec
        ),
    )


_THRESHOLD_KEYS = ("severe_g", "moderate_g", "severe_speed", "moderate_speed")


def merge_config(cfg: CrashIQConfig, overrides: Mapping[str, Any]) -> CrashIQConfig:
    """
    Merge explicit CLI overrides over file config.
    Only applies keys that are present AND not None/empty.
    """
    def given(name: str) -> bool:
        v = overrides.get(name)
        return v is not None and not (isinstance(v, str) and not v.strip())

    thr_changes = {k: _coerce_float(overrides[k], getattr(cfg.thresholds, k)) for k in _THRESHOLD_KEYS if given(k)}
    thresholds = replace(cfg.thresholds, **thr_changes) if thr_changes else cfg.thresholds

    changes: dict[str, Any] = {"thresholds": thresholds}
    for name in ("input", "out", "json_out", "summary_out", "llm_model"):
        if given(name):
            changes[name] = str(overrides[name]).strip()
    for name in ("detection_g", "narrative_timeout_sec"):
        if given(name):
            changes[name] = _coerce_float(overrides[name], getattr(cfg, name))
    for name in ("include_all", "llm_enabled"):
        if given(name):
            changes[name] = _coerce_bool(overrides[name], getattr(cfg, name))

    return replace(cfg, **changes)

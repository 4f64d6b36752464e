"""Incident narrative for a classification.

Two stages:
- stage 1 (optional): an external text-generation delegate writes a
  professional summary from a fixed, structured prompt;
- stage 2 (always available): deterministic string formatting.

Any stage-1 failure (error, timeout, cancellation, blank output) silently
falls back to stage 2. There is exactly one stage-1 attempt per call.
"""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import CancelledError
from typing import Protocol

from crashiq.core.contract import DEFAULT_LLM_MODEL, DEFAULT_NARRATIVE_TIMEOUT_SEC
from crashiq.core.interpretation import PHYSICS_GUIDE
from crashiq.core.models import ImpactType, Severity

logger = logging.getLogger(__name__)


class NarrativeUnavailable(RuntimeError):
    """Raised by a delegate that cannot produce a narrative."""


class NarrativeDelegate(Protocol):
    def generate(self, prompt: str) -> str:
        ...


_SEVERITY_QUALIFIER = {
    Severity.SEVERE: "indicating significant collision forces",
    Severity.MODERATE: "suggesting moderate collision",
    Severity.MINOR: "consistent with minor impact",
}


def fallback_narrative(
    severity: Severity,
    impact_type: ImpactType,
    g_force: float,
    speed_mph: float,
    speed_limit_mph: float,
    was_speeding: bool,
    airbag_likely: bool,
) -> str:
    impact = impact_type.value.lower().replace("_", " ")
    parts = [
        f"Vehicle experienced {severity.value.lower()} {impact} impact.",
        f"G-force of {g_force:.1f} detected, {_SEVERITY_QUALIFIER[severity]}.",
        f"Speed at event: {speed_mph:.0f} mph (limit: {speed_limit_mph:.0f} mph).",
        "Vehicle was exceeding posted speed limit." if was_speeding else "Vehicle was within posted speed limit.",
    ]
    if airbag_likely:
        parts.append("Airbag deployment is likely based on impact force.")
    return " ".join(parts)


def build_narrative_prompt(
    severity: Severity,
    impact_type: ImpactType,
    g_force: float,
    speed_mph: float,
    speed_limit_mph: float,
    was_speeding: bool,
    airbag_likely: bool,
    accel_x: float,
    accel_y: float,
    accel_z: float,
) -> str:
    guide = "\n".join(f"- {line}" for line in PHYSICS_GUIDE)
    return f"""You are a senior insurance claims analyst writing a professional incident summary
for a First Notice of Loss (FNOL) report. Based on the telemetry data, write a
clear, factual, 3-4 sentence narrative that:

1. Describes the collision physics in professional insurance terminology
2. Explains what the sensor data indicates about the crash dynamics
3. Notes any safety concerns or risk factors
4. Uses objective language suitable for legal/regulatory documentation

TELEMETRY DATA:
- G-Force at impact: {g_force:.1f} g
- Vehicle speed: {speed_mph:.0f} mph (Speed limit: {speed_limit_mph:.0f} mph)
- Speeding: {"Yes" if was_speeding else "No"}
- Accelerometer X (longitudinal): {accel_x:.2f} g (negative=forward deceleration, positive=pushed forward)
- Accelerometer Y (lateral): {accel_y:.2f} g (side-to-side forces)
- Accelerometer Z (vertical): {accel_z:.2f} g (vertical forces, rollover indicator)

CLASSIFICATION (pre-determined by rule engine):
- Severity: {severity.value}
- Impact Type: {impact_type.value}
- Airbag Deployment Likely: {"Yes" if airbag_likely else "No"}

PHYSICS INTERPRETATION GUIDE:
{guide}

Write ONLY the narrative paragraph. Do not include headers, bullet points, or metadata.
Keep the tone professional and factual, similar to an accident reconstruction report.
"""


class GeminiNarrativeDelegate:
    """Narrative delegate backed by the Google Gemini API."""

    def __init__(self, *, api_key: str | None = None, model: str = DEFAULT_LLM_MODEL):
        self.model = model
        self._api_key = api_key or os.environ.get("GEMINI_API_KEY")

    def _get_client(self):
        import google.generativeai as genai

        genai.configure(api_key=self._api_key)
        return genai.GenerativeModel(self.model)

    def generate(self, prompt: str) -> str:
        if not self._api_key:
            raise NarrativeUnavailable("GEMINI_API_KEY required for LLM narrative")
        response = self._get_client().generate_content(prompt)
        return response.text


class _DelegateCall(threading.Thread):
    """
    Runs one delegate.generate() on a daemon thread and keeps its outcome.
    A hung call never holds up interpreter exit.
    """

    def __init__(self, delegate: NarrativeDelegate, prompt: str) -> None:
        super().__init__(name="crashiq-narrative", daemon=True)
        self._delegate = delegate
        self._prompt = prompt
        self.text: str | None = None
        self.error: Exception | None = None

    def run(self) -> None:
        try:
            self.text = self._delegate.generate(self._prompt)
        except Exception as exc:  # handed back to the caller thread
            self.error = exc


def _call_delegate(delegate: NarrativeDelegate, prompt: str, timeout_sec: float) -> str | None:
    """
    One bounded delegate call. Returns None on any failure.
    On timeout the daemon worker is abandoned and its late result discarded.
    """
    call = _DelegateCall(delegate, prompt)
    call.start()
    call.join(timeout_sec)

    if call.is_alive():
        logger.warning("LLM narrative timed out after %.1fs, using fallback", timeout_sec)
        return None
    if isinstance(call.error, CancelledError):
        logger.warning("LLM narrative cancelled, using fallback")
        return None
    if call.error is not None:
        logger.warning("LLM narrative generation failed, using fallback: %s", call.error)
        return None

    narrative = str(call.text or "").strip()
    if not narrative:
        logger.warning("LLM narrative was empty, using fallback")
        return None
    logger.debug("LLM narrative generated: %s", narrative[:100])
    return narrative


def generate_narrative(
    severity: Severity,
    impact_type: ImpactType,
    g_force: float,
    speed_mph: float,
    speed_limit_mph: float,
    was_speeding: bool,
    airbag_likely: bool,
    accel_x: float,
    accel_y: float,
    accel_z: float,
    *,
    delegate: NarrativeDelegate | None = None,
    timeout_sec: float = DEFAULT_NARRATIVE_TIMEOUT_SEC,
) -> str:
    """Narrative from the delegate if it answers in time, otherwise the deterministic text."""
    if delegate is not None:
        prompt = build_narrative_prompt(
            severity, impact_type, g_force, speed_mph, speed_limit_mph,
            was_speeding, airbag_likely, accel_x, accel_y, accel_z,
        )
        logger.info("Generating LLM narrative for %s %s impact", severity.value, impact_type.value)
        narrative = _call_delegate(delegate, prompt, timeout_sec)
        if narrative is not None:
            return narrative

    return fallback_narrative(
        severity, impact_type, g_force, speed_mph, speed_limit_mph, was_speeding, airbag_likely
    )

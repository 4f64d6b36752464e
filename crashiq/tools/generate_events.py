from __future__ import annotations

import argparse
import csv
import random
from dataclasses import dataclass
from pathlib import Path

# ----------------------------
# Accident profile catalog
# ----------------------------


@dataclass(frozen=True)
class AccidentProfile:
    base_g: float
    accel_x: float
    accel_y: float
    accel_z: float
    speed_mph: float
    expected_impact: str


# Moderate-severity sensor signature per accident type; severity scales the forces.
ACCIDENT_PROFILES: dict[str, AccidentProfile] = {
    "rollover": AccidentProfile(7.5, -2.5, 1.8, 7.2, 45, "ROLLOVER"),
    "head_on": AccidentProfile(9.0, -10.5, 0.8, 1.2, 65, "FRONTAL"),
    "t_bone": AccidentProfile(7.8, -1.5, 7.2, 0.9, 0, "SIDE"),
    "single_vehicle": AccidentProfile(6.5, -7.0, 0.5, 0.8, 40, "FRONTAL"),
    "rear_end_collision": AccidentProfile(5.5, -5.8, 0.4, 0.6, 35, "FRONTAL"),
    "rear_ended": AccidentProfile(4.2, 4.5, 0.3, 0.5, 15, "REAR"),
    "side_swipe": AccidentProfile(3.2, -0.8, 2.8, 0.4, 30, "SIDE"),
    "multi_vehicle_pileup": AccidentProfile(5.8, -4.2, 2.1, 1.5, 28, "FRONTAL"),
    "hit_and_run": AccidentProfile(4.5, -3.2, 1.8, 0.9, 25, "FRONTAL"),
    "frontal": AccidentProfile(4.8, -4.2, 0.6, 0.8, 35, "FRONTAL"),
}

SEVERITY_MULTIPLIERS = {"minor": 0.5, "moderate": 1.0, "severe": 1.3}

PRECIPITATION_CHOICES = [None, None, None, "Rain", "Snow", "Sleet"]
FACTOR_CHOICES = ["Wet road surface", "Construction zone", "Low visibility", "Heavy traffic"]
OUTREACH_CHOICES = ["CONFIRMED_OK", "PENDING", "NO_RESPONSE", "CONFIRMED_INJURED"]

SPEED_LIMIT_MPH = 35

CSV_COLUMNS = [
    "event_id",
    "accident_type",
    "g_force",
    "speed_mph",
    "speed_limit_mph",
    "accel_x",
    "accel_y",
    "accel_z",
    "precipitation",
    "contributing_factors",
    "outreach_status",
]


# ----------------------------
# Helpers
# ----------------------------

def make_event(
    accident_type: str,
    severity: str,
    rng: random.Random,
    *,
    jitter: float = 0.0,
    with_context: bool = True,
) -> dict[str, object]:
    """One synthetic event row (without event_id) for an accident type and severity."""
    if accident_type not in ACCIDENT_PROFILES:
        raise ValueError(f"Unknown accident type: {accident_type}")
    if severity not in SEVERITY_MULTIPLIERS:
        raise ValueError(f"Unknown severity: {severity}")

    prof = ACCIDENT_PROFILES[accident_type]
    m = SEVERITY_MULTIPLIERS[severity]

    def noisy(v: float) -> float:
        return v * m + (rng.gauss(0.0, jitter) if jitter > 0 else 0.0)

    row: dict[str, object] = {
        "accident_type": accident_type,
        "g_force": round(abs(noisy(prof.base_g)), 2),
        "speed_mph": prof.speed_mph,
        "speed_limit_mph": SPEED_LIMIT_MPH,
        "accel_x": round(noisy(prof.accel_x), 2),
        "accel_y": round(noisy(prof.accel_y), 2),
        "accel_z": round(noisy(prof.accel_z), 2),
        "precipitation": "",
        "contributing_factors": "",
        "outreach_status": "",
    }

    if with_context:
        precip = rng.choice(PRECIPITATION_CHOICES)
        factors = rng.sample(FACTOR_CHOICES, k=rng.randint(0, 2))
        row["precipitation"] = precip or ""
        row["contributing_factors"] = ";".join(factors)
        row["outreach_status"] = rng.choice(OUTREACH_CHOICES)

    return row


# ----------------------------
# Core generation
# ----------------------------

def generate_csv(
    out_path: Path,
    num_events: int,
    seed: int | None,
    accident_type: str | None,
    severity: str | None,
    jitter: float,
    with_context: bool,
    print_summary: bool,
) -> None:
    """
    Write num_events synthetic accident events. A None accident_type or
    severity picks one at random per event.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)

    rng = random.Random(seed)
    types = sorted(ACCIDENT_PROFILES)
    severities = list(SEVERITY_MULTIPLIERS)

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
        w.writeheader()

        for i in range(num_events):
            acc = accident_type or rng.choice(types)
            sev = severity or rng.choice(severities)
            row = make_event(acc, sev, rng, jitter=jitter, with_context=with_context)
            row["event_id"] = f"EVT-{i + 1:04d}"
            w.writerow(row)

    if print_summary:
        print(f"Generated {out_path} with {num_events} events")
        print(
            f"Type: {accident_type or 'random'} | Severity: {severity or 'random'} | "
            f"Jitter: {jitter} | Seed: {seed}"
        )


# ----------------------------
# CLI
# ----------------------------

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="generate_events.py",
        description="Generate synthetic accident telemetry events.csv for CrashIQ demo/testing.",
    )

    p.add_argument("--out", default="data/events.csv",
                   help="Output CSV path (default: data/events.csv)")
    p.add_argument("--num", type=int, default=10,
                   help="Number of accident events to generate")
    p.add_argument("--seed", type=int, default=None,
                   help="Random seed for reproducible output")
    p.add_argument("--type", dest="accident_type", choices=sorted(ACCIDENT_PROFILES), default=None,
                   help="Accident type (default: random per event)")
    p.add_argument("--severity", choices=list(SEVERITY_MULTIPLIERS), default=None,
                   help="Severity preset (default: random per event)")
    p.add_argument("--jitter", type=float, default=0.0,
                   help="Gaussian noise sigma added to forces (g)")
    p.add_argument("--no-context", action="store_true",
                   help="Leave weather/contributing-factor/outreach columns empty")
    p.add_argument("--print-summary", action="store_true",
                   help="Print generation summary to console")

    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    if args.num <= 0:
        raise SystemExit("--num must be > 0")
    if args.jitter < 0:
        raise SystemExit("--jitter must be >= 0")

    generate_csv(
        out_path=Path(args.out),
        num_events=args.num,
        seed=args.seed,
        accident_type=args.accident_type,
        severity=args.severity,
        jitter=args.jitter,
        with_context=not args.no_context,
        print_summary=args.print_summary,
    )


if __name__ == "__main__":
    main()

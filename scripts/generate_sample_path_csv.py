from __future__ import annotations

import argparse
import csv
import math
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Final

from zoneinfo import ZoneInfo

from motion_state.geo import offset_position


TZ: Final[str] = "Asia/Seoul"


@dataclass(frozen=True, slots=True)
class Phase:
    name: str
    seconds: int
    speed_mps: float


def _epoch_ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def build_phases(rng: random.Random, phases: int) -> list[Phase]:
    """Alternate standing/walking/jogging, with the odd short pause at a crossing."""

    out: list[Phase] = []
    for i in range(phases):
        if i % 2 == 0:
            # short stops (< decay) exercise the anti-flicker window
            secs = rng.choice([2, 2, 20, 45, 90])
            out.append(Phase("stand", secs, 0.0))
        else:
            speed = rng.choice([1.2, 1.4, 2.8])
            out.append(Phase("walk" if speed < 2.0 else "jog", rng.randint(30, 180), speed))
    return out


def generate_points(
    *,
    seed: int,
    start_local: datetime,
    phases: int,
    lat: float,
    lon: float,
) -> list[dict[str, str]]:
    """Generate fake Path.csv rows sampled at ~1 Hz."""

    rng = random.Random(seed)
    cur = start_local.replace(tzinfo=ZoneInfo(TZ))
    heading = rng.uniform(0, 2 * math.pi)

    out: list[dict[str, str]] = []
    for phase in build_phases(rng, phases):
        for _ in range(phase.seconds):
            cur = cur + timedelta(seconds=rng.uniform(0.8, 1.2))
            heading += rng.uniform(-0.2, 0.2)
            step = phase.speed_mps * rng.uniform(0.85, 1.15)
            # GPS jitter of ~1 m while standing
            jitter_n = rng.gauss(0.0, 0.6)
            jitter_e = rng.gauss(0.0, 0.6)
            lat, lon = offset_position(lat, lon, step * math.cos(heading), step * math.sin(heading))
            rep_lat, rep_lon = offset_position(lat, lon, jitter_n, jitter_e)

            # Speed drops out now and then (reported as -1)
            speed = -1.0 if rng.random() < 0.15 else max(0.0, step + rng.gauss(0.0, 0.15))
            hacc = rng.choice([3.0, 5.0, 5.0, 8.0, 12.0])

            out.append(
                {
                    "geoTime": str(_epoch_ms(cur)),
                    "latitude": f"{rep_lat:.7f}",
                    "longitude": f"{rep_lon:.7f}",
                    "horizontalAccuracy": f"{hacc:.1f}",
                    "speed": f"{speed:.2f}",
                    "phase": phase.name,
                }
            )
    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake Path.csv with walk/stand phases (privacy-safe).")
    p.add_argument("--out", type=str, default="sample_data/Path.csv", help="Output CSV path")
    p.add_argument("--phases", type=int, default=12, help="Number of stand/walk phases")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument(
        "--start",
        type=str,
        default="2025-09-05 08:00:00",
        help="Start local time in Asia/Seoul, e.g. '2025-09-05 08:00:00'",
    )
    p.add_argument("--lat", type=float, default=37.5665, help="Start latitude")
    p.add_argument("--lon", type=float, default=126.9780, help="Start longitude")
    args = p.parse_args()

    rows = generate_points(
        seed=args.seed,
        start_local=datetime.fromisoformat(args.start),
        phases=args.phases,
        lat=args.lat,
        lon=args.lon,
    )
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = ["geoTime", "latitude", "longitude", "horizontalAccuracy", "speed", "phase"]
    with out_path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        w.writerows(rows)

    print(f"Generated: {out_path} (rows={len(rows)}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

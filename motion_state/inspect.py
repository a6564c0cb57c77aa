"""Inspect a recorded track before tuning classifier thresholds."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from motion_state.models import Sample
from motion_state.timeutils import DeltaStats, delta_stats


@dataclass(frozen=True, slots=True)
class InspectResult:
    """High-level track inspection result."""

    samples: int
    min_time_ms: int | None
    max_time_ms: int | None
    delta: DeltaStats | None
    valid_speed_samples: int
    max_speed_mps: float | None
    median_accuracy_m: float | None
    duplicates_geo_time: int

    @property
    def valid_speed_ratio(self) -> float:
        return self.valid_speed_samples / self.samples if self.samples else 0.0


def inspect_samples(samples: Sequence[Sample]) -> InspectResult:
    """Inspect already-loaded samples."""

    if not samples:
        return InspectResult(
            samples=0,
            min_time_ms=None,
            max_time_ms=None,
            delta=None,
            valid_speed_samples=0,
            max_speed_mps=None,
            median_accuracy_m=None,
            duplicates_geo_time=0,
        )

    times = sorted(s.geo_time_ms for s in samples)
    dupe = 0
    for i in range(1, len(times)):
        if times[i] == times[i - 1]:
            dupe += 1

    speeds = [s.speed_mps for s in samples if s.has_valid_speed]
    accs = sorted(s.horizontal_accuracy_m for s in samples if s.horizontal_accuracy_m >= 0)
    return InspectResult(
        samples=len(samples),
        min_time_ms=times[0],
        max_time_ms=times[-1],
        delta=delta_stats(times),
        valid_speed_samples=len(speeds),
        max_speed_mps=max(speeds) if speeds else None,
        median_accuracy_m=accs[len(accs) // 2] if accs else None,
        duplicates_geo_time=dupe,
    )

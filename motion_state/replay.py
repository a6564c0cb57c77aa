"""Replay a recorded track through the classifier and report moving intervals."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from motion_state.classifier import ClassifierConfig, MotionClassifier
from motion_state.geo import sample_distance_m
from motion_state.models import MovingInterval, Sample
from motion_state.timeutils import dt_from_epoch_ms, format_hhmmss


@dataclass(frozen=True, slots=True)
class TimelineRow:
    """One classified sample."""

    sample: Sample
    movement_detected: bool
    reason: str
    is_moving: bool


def classify_track(samples: Iterable[Sample], config: ClassifierConfig | None = None) -> list[TimelineRow]:
    """Feed samples (sorted by time) through a fresh classifier.

    Args:
        samples: Track samples (can be unsorted).
        config: Classifier tunables. Defaults to ClassifierConfig().

    Returns:
        One TimelineRow per sample, in time order.
    """

    clf = MotionClassifier(config=config or ClassifierConfig())
    rows: list[TimelineRow] = []
    for s in sorted(samples, key=lambda p: p.geo_time_ms):
        d = clf.process(s)
        rows.append(TimelineRow(sample=s, movement_detected=d.movement_detected, reason=d.reason, is_moving=d.is_moving))
    return rows


def find_moving_intervals(
    timeline: Sequence[TimelineRow],
    tz_name: str,
    min_duration_s: float = 0.0,
) -> list[MovingInterval]:
    """Collapse a classified timeline into moving intervals.

    An interval starts at the sample that switched the state to moving and
    ends at the sample that switched it back (or the last sample if the track
    ends while moving). Intervals shorter than min_duration_s are dropped.
    """

    intervals: list[MovingInterval] = []
    start: Sample | None = None
    prev: Sample | None = None
    count = 0
    dist = 0.0

    def _close(end: Sample) -> None:
        assert start is not None
        if end.geo_time_ms <= start.geo_time_ms:
            return
        if (end.geo_time_ms - start.geo_time_ms) / 1000.0 < min_duration_s:
            return
        intervals.append(
            MovingInterval(
                interval_id=len(intervals) + 1,
                start_dt=dt_from_epoch_ms(start.geo_time_ms, tz_name),
                end_dt=dt_from_epoch_ms(end.geo_time_ms, tz_name),
                start_ms=start.geo_time_ms,
                end_ms=end.geo_time_ms,
                samples=count,
                distance_m=dist,
            )
        )

    for row in timeline:
        cur = row.sample
        if start is None:
            if row.is_moving:
                start = cur
                count = 1
                dist = 0.0
        else:
            if prev is not None:
                dist += sample_distance_m(prev, cur)
            count += 1
            if not row.is_moving:
                _close(cur)
                start = None
        prev = cur

    if start is not None and prev is not None:
        _close(prev)
    return intervals


def write_intervals_csv(intervals: Sequence[MovingInterval], out_path: str | Path) -> None:
    """Write moving intervals to CSV."""

    p = Path(out_path)
    with p.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(
            f,
            fieldnames=[
                "interval_id",
                "start_time",
                "end_time",
                "duration_seconds",
                "duration_hhmmss",
                "samples",
                "distance_m",
                "start_epoch_ms",
                "end_epoch_ms",
            ],
        )
        w.writeheader()
        for iv in intervals:
            w.writerow(
                {
                    "interval_id": iv.interval_id,
                    "start_time": iv.start_dt.isoformat(sep=" "),
                    "end_time": iv.end_dt.isoformat(sep=" "),
                    "duration_seconds": f"{iv.duration_seconds:.3f}",
                    "duration_hhmmss": format_hhmmss(iv.duration_seconds),
                    "samples": iv.samples,
                    "distance_m": f"{iv.distance_m:.1f}",
                    "start_epoch_ms": iv.start_ms,
                    "end_epoch_ms": iv.end_ms,
                }
            )


def write_timeline_csv(timeline: Iterable[TimelineRow], out_path: str | Path, tz_name: str) -> None:
    """Export the per-sample classification with readable local times."""

    p = Path(out_path)
    with p.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(
            f,
            fieldnames=[
                "time_local",
                "epoch_ms",
                "latitude",
                "longitude",
                "speed_mps",
                "horizontal_accuracy_m",
                "movement_detected",
                "reason",
                "is_moving",
            ],
        )
        w.writeheader()
        for row in timeline:
            s = row.sample
            w.writerow(
                {
                    "time_local": dt_from_epoch_ms(s.geo_time_ms, tz_name).isoformat(sep=" "),
                    "epoch_ms": s.geo_time_ms,
                    "latitude": s.latitude,
                    "longitude": s.longitude,
                    "speed_mps": s.speed_mps,
                    "horizontal_accuracy_m": s.horizontal_accuracy_m,
                    "movement_detected": int(row.movement_detected),
                    "reason": row.reason,
                    "is_moving": int(row.is_moving),
                }
            )


@dataclass(frozen=True, slots=True)
class IntervalsTotal:
    """Total moving time summary."""

    intervals: int
    total_seconds: float
    total_distance_m: float

    @property
    def total_hhmmss(self) -> str:
        return format_hhmmss(self.total_seconds)


def sum_intervals(intervals: Iterable[MovingInterval]) -> IntervalsTotal:
    """Sum interval durations and distances."""

    total = 0.0
    dist = 0.0
    count = 0
    for iv in intervals:
        total += iv.duration_seconds
        dist += iv.distance_m
        count += 1
    return IntervalsTotal(intervals=count, total_seconds=total, total_distance_m=dist)

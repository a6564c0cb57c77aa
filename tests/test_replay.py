from __future__ import annotations

import csv

import pytest

from helpers import make_sample
from motion_state.classifier import ClassifierConfig
from motion_state.replay import (
    classify_track,
    find_moving_intervals,
    sum_intervals,
    write_intervals_csv,
    write_timeline_csv,
)

TZ = "Asia/Seoul"


def _walk_then_stand():
    # stand 0-2s, walk north 1.4 m/s for 3-10s, stand from 11s on
    samples = [make_sample(t, speed=0.0) for t in range(0, 3)]
    samples += [make_sample(t, speed=1.4, north_m=1.4 * (t - 2)) for t in range(3, 11)]
    samples += [make_sample(t, speed=0.0, north_m=1.4 * 8) for t in range(11, 20)]
    return samples


def test_classify_track_sorts_and_labels() -> None:
    samples = _walk_then_stand()
    timeline = classify_track(list(reversed(samples)))
    assert [r.sample for r in timeline] == samples
    assert timeline[0].reason == "first_sample"
    assert timeline[3].reason == "speed"
    assert [r.is_moving for r in timeline[:3]] == [False, False, False]
    assert all(r.is_moving for r in timeline[3:13])
    # last movement at 10s; 13s is the first sample with >= 3s of quiet
    assert timeline[13].is_moving is False


def test_find_moving_intervals() -> None:
    timeline = classify_track(_walk_then_stand())
    intervals = find_moving_intervals(timeline, TZ)
    assert len(intervals) == 1
    iv = intervals[0]
    assert iv.interval_id == 1
    assert iv.duration_seconds == pytest.approx(10.0)
    assert iv.samples == 11
    assert iv.distance_m == pytest.approx(1.4 * 7, rel=0.02)
    assert iv.start_dt.utcoffset().total_seconds() == 9 * 3600


def test_interval_still_open_at_track_end_closes_on_last_sample() -> None:
    samples = [make_sample(0, speed=0.0), make_sample(1, speed=2.0), make_sample(5, speed=2.0)]
    intervals = find_moving_intervals(classify_track(samples), TZ)
    assert len(intervals) == 1
    assert intervals[0].duration_seconds == pytest.approx(4.0)


def test_short_pause_does_not_split_interval() -> None:
    samples = [make_sample(0, speed=2.0), make_sample(1, speed=2.0), make_sample(2, speed=0.0)]
    samples += [make_sample(3, speed=2.0), make_sample(10, speed=0.0)]
    intervals = find_moving_intervals(classify_track(samples), TZ)
    assert len(intervals) == 1


def test_min_duration_filters_and_ids_stay_sequential() -> None:
    samples = [make_sample(0, speed=2.0), make_sample(4, speed=0.0)]
    samples += [make_sample(10, speed=2.0), make_sample(20, speed=2.0), make_sample(30, speed=0.0)]
    timeline = classify_track(samples)
    assert len(find_moving_intervals(timeline, TZ)) == 2
    kept = find_moving_intervals(timeline, TZ, min_duration_s=10.0)
    assert [iv.interval_id for iv in kept] == [1]
    assert kept[0].duration_seconds == pytest.approx(20.0)


def test_config_changes_outcome() -> None:
    samples = [make_sample(t, speed=1.0) for t in range(5)]
    assert find_moving_intervals(classify_track(samples), TZ)
    cyc = ClassifierConfig.cycling()
    assert find_moving_intervals(classify_track(samples, cyc), TZ) == []


def test_sum_intervals() -> None:
    samples = [make_sample(0, speed=2.0), make_sample(4, speed=0.0)]
    samples += [make_sample(10, speed=2.0), make_sample(20, speed=2.0), make_sample(30, speed=0.0)]
    total = sum_intervals(find_moving_intervals(classify_track(samples), TZ))
    assert total.intervals == 2
    assert total.total_seconds == pytest.approx(24.0)
    assert total.total_hhmmss == "00:00:24"


def test_write_csvs(tmp_path) -> None:
    timeline = classify_track(_walk_then_stand())
    intervals = find_moving_intervals(timeline, TZ)

    out = tmp_path / "intervals.csv"
    write_intervals_csv(intervals, out)
    with out.open(encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 1
    assert rows[0]["duration_hhmmss"] == "00:00:10"
    assert rows[0]["start_time"].endswith("+09:00")

    tl = tmp_path / "timeline.csv"
    write_timeline_csv(timeline, tl, TZ)
    with tl.open(encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == len(timeline)
    assert rows[3]["reason"] == "speed"
    assert rows[3]["is_moving"] == "1"
    assert rows[0]["is_moving"] == "0"

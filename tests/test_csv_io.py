from __future__ import annotations

import logging

import pytest

from helpers import make_sample, write_path_csv
from motion_state.csv_io import iter_samples, load_samples
from motion_state.inspect import inspect_samples


def test_load_samples_parses_rows(tmp_path) -> None:
    path = tmp_path / "Path.csv"
    src = [make_sample(0, speed=0.0), make_sample(1, speed=1.25, north_m=2.0), make_sample(2, speed=-1.0)]
    write_path_csv(path, src)

    samples, summary = load_samples(path)

    assert summary.rows_total == 3
    assert summary.rows_parsed == 3
    assert summary.rows_skipped == 0
    assert "geoTime" in summary.fieldnames
    assert [s.geo_time_ms for s in samples] == [s.geo_time_ms for s in src]
    assert samples[1].speed_mps == pytest.approx(1.25)
    assert samples[1].latitude == pytest.approx(src[1].latitude, abs=1e-7)
    assert samples[2].has_valid_speed is False


def test_missing_speed_column_means_unavailable(tmp_path) -> None:
    path = tmp_path / "Path.csv"
    path.write_text("geoTime,latitude,longitude\n1000,37.5,126.9\n", encoding="utf-8")
    samples, _ = load_samples(path)
    assert samples[0].speed_mps == -1.0
    assert samples[0].horizontal_accuracy_m == -1.0


def test_bad_rows_are_skipped_with_warning(tmp_path, caplog) -> None:
    path = tmp_path / "Path.csv"
    write_path_csv(path, [make_sample(0)], extra_rows=["oops,37.5,126.9,5,0", "2000,,126.9,5,0"])

    with caplog.at_level(logging.WARNING, logger="motion_state.csv_io"):
        samples, summary = load_samples(path)

    assert len(samples) == 1
    assert summary.rows_skipped == 2
    assert "2" in caplog.text


def test_missing_required_column_raises(tmp_path) -> None:
    path = tmp_path / "Path.csv"
    path.write_text("geoTime,latitude,speed\n1000,37.5,0\n", encoding="utf-8")
    with pytest.raises(KeyError):
        load_samples(path)
    with pytest.raises(KeyError):
        list(iter_samples(path))


def test_iter_samples_streams(tmp_path) -> None:
    path = tmp_path / "Path.csv"
    write_path_csv(path, [make_sample(t) for t in range(4)], extra_rows=["bad,row,,,"])
    assert len(list(iter_samples(path))) == 4


def test_inspect_samples() -> None:
    samples = [make_sample(0, speed=0.0), make_sample(1, speed=2.0), make_sample(3, speed=-1.0), make_sample(3)]
    res = inspect_samples(samples)
    assert res.samples == 4
    assert res.valid_speed_samples == 2
    assert res.valid_speed_ratio == pytest.approx(0.5)
    assert res.max_speed_mps == pytest.approx(2.0)
    assert res.duplicates_geo_time == 1
    assert res.delta is not None
    assert res.delta.max_s == pytest.approx(2.0)
    assert res.median_accuracy_m == pytest.approx(5.0)


def test_inspect_empty() -> None:
    res = inspect_samples([])
    assert res.samples == 0
    assert res.delta is None
    assert res.valid_speed_ratio == 0.0

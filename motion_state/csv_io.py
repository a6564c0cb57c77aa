"""CSV input for recorded location tracks (the exported Path.csv format)."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Mapping, Sequence

from motion_state.models import Sample

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CsvSummary:
    """Quick summary of CSV parsing."""

    rows_total: int
    rows_parsed: int
    rows_skipped: int
    fieldnames: Sequence[str]


def _parse_int(value: str) -> int:
    return int(value.strip())


def _parse_float(value: str) -> float:
    return float(value.strip())


def _sample_from_row(row: Mapping[str, str]) -> Sample:
    return Sample(
        geo_time_ms=_parse_int(row["geoTime"]),
        latitude=_parse_float(row["latitude"]),
        longitude=_parse_float(row["longitude"]),
        # 缺失的速度按“不可用”处理（负值），由距离判定兜底
        speed_mps=_parse_float(row.get("speed", "-1") or "-1"),
        horizontal_accuracy_m=_parse_float(row.get("horizontalAccuracy", "-1") or "-1"),
    )


def iter_samples(csv_path: str | Path) -> Iterator[Sample]:
    """Yield Sample objects from Path.csv.

    Args:
        csv_path: Path to the exported CSV.

    Yields:
        Samples from rows parsed successfully.

    Raises:
        KeyError: If a required column (geoTime/latitude/longitude) is missing.

    Notes:
        The export uses these columns:
          - geoTime: epoch milliseconds
          - latitude/longitude: decimal degrees
          - speed (m/s, -1 when unknown), horizontalAccuracy (m)
    """

    p = Path(csv_path)
    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            return

        for row in reader:
            try:
                yield _sample_from_row(row)
            except KeyError as exc:
                raise KeyError(f"CSV缺少必要字段：{exc}. 实际字段：{reader.fieldnames}") from exc
            except (ValueError, TypeError, AttributeError):
                # 某些行可能损坏/空行，直接跳过
                continue


def load_samples(csv_path: str | Path) -> tuple[list[Sample], CsvSummary]:
    """Load all samples into memory.

    Args:
        csv_path: Path to the exported CSV.

    Returns:
        (samples, summary)

    Raises:
        KeyError: If a required column is missing from the header.
    """

    p = Path(csv_path)
    rows_total = 0
    parsed: list[Sample] = []
    fieldnames: Sequence[str] = ()

    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        fieldnames = reader.fieldnames or ()
        missing = [c for c in ("geoTime", "latitude", "longitude") if fieldnames and c not in fieldnames]
        if missing:
            raise KeyError(f"CSV缺少必要字段：{missing}. 实际字段：{list(fieldnames)}")
        for row in reader:
            rows_total += 1
            try:
                parsed.append(_sample_from_row(row))
            except (KeyError, ValueError, TypeError, AttributeError):
                continue

    summary = CsvSummary(
        rows_total=rows_total,
        rows_parsed=len(parsed),
        rows_skipped=rows_total - len(parsed),
        fieldnames=fieldnames,
    )
    if summary.rows_skipped > 0:
        logger.warning("CSV中有 %s 行解析失败已跳过", summary.rows_skipped)
    return parsed, summary

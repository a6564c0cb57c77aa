from __future__ import annotations

from motion_state.geo import offset_position
from motion_state.models import Sample

BASE_LAT = 37.5665
BASE_LON = 126.9780
BASE_MS = 1_757_030_400_000  # 2025-09-05 00:00:00 UTC


def make_sample(t_s: float, speed: float = -1.0, north_m: float = 0.0, east_m: float = 0.0) -> Sample:
    """Sample at BASE_MS + t_s seconds, offset from the base position by meters."""

    lat, lon = offset_position(BASE_LAT, BASE_LON, north_m, east_m)
    return Sample(
        geo_time_ms=BASE_MS + int(round(t_s * 1000)),
        latitude=lat,
        longitude=lon,
        speed_mps=speed,
        horizontal_accuracy_m=5.0,
    )


def write_path_csv(path, samples, extra_rows: list[str] | None = None) -> None:
    lines = ["geoTime,latitude,longitude,horizontalAccuracy,speed"]
    for s in samples:
        lines.append(f"{s.geo_time_ms},{s.latitude:.7f},{s.longitude:.7f},{s.horizontal_accuracy_m},{s.speed_mps}")
    lines.extend(extra_rows or [])
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")

"""Data models for location samples and moving intervals."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Final


@dataclass(frozen=True, slots=True)
class Sample:
    """A single location reading delivered by a location provider.

    Attributes:
        geo_time_ms: Unix epoch milliseconds.
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        speed_mps: Reported speed in meters/second. Negative means invalid/unavailable.
        horizontal_accuracy_m: Horizontal accuracy in meters. -1.0 when unknown.
    """

    geo_time_ms: int
    latitude: float
    longitude: float
    speed_mps: float = -1.0
    horizontal_accuracy_m: float = -1.0

    @property
    def geo_time_s(self) -> float:
        """Unix epoch seconds as float."""

        return self.geo_time_ms / 1000.0

    @property
    def has_valid_speed(self) -> bool:
        return self.speed_mps >= 0.0


@dataclass(frozen=True, slots=True)
class MovingInterval:
    """A continuous time interval during which the classifier reported "moving".

    Note:
        Start/end are stored as timezone-aware datetimes for readability.
        The epoch fields are kept for stable numeric computations.
    """

    interval_id: int
    start_dt: datetime
    end_dt: datetime
    start_ms: int
    end_ms: int
    samples: int
    distance_m: float

    @property
    def duration_seconds(self) -> float:
        """Interval duration in seconds."""

        return max(0.0, (self.end_ms - self.start_ms) / 1000.0)


DEFAULT_TZ: Final[str] = "Asia/Seoul"

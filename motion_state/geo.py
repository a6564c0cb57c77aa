"""Geospatial utilities (no external dependencies)."""

from __future__ import annotations

import math

from motion_state.models import Sample


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute Haversine distance in meters between two lat/lon points.

    Args:
        lat1: Latitude 1 in degrees.
        lon1: Longitude 1 in degrees.
        lat2: Latitude 2 in degrees.
        lon2: Longitude 2 in degrees.

    Returns:
        Distance in meters.
    """

    r = 6_371_000.0  # mean Earth radius in meters
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return r * c


def sample_distance_m(a: Sample, b: Sample) -> float:
    """Distance in meters between the positions of two samples."""

    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)


def offset_position(lat: float, lon: float, north_m: float, east_m: float) -> tuple[float, float]:
    """Move a lat/lon point by a small north/east offset in meters.

    Equirectangular approximation; fine for the few-meter steps used when
    synthesizing tracks.
    """

    r = 6_371_000.0
    d_lat = math.degrees(north_m / r)
    d_lon = math.degrees(east_m / (r * math.cos(math.radians(lat))))
    return lat + d_lat, lon + d_lon

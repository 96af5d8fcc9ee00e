from __future__ import annotations

from typing import Sequence

import numpy as np

from .points import validate_polygon


EARTH_RADIUS_M = 6_371_000.0
M2_PER_HECTARE = 10_000.0
AREA_DECIMALS = 4
MIN_POLYGON_POINTS = 3


def compute_area_m2(points: Sequence[object]) -> float:
    """Enclosed area of a GPS boundary in square meters (unrounded).

    Spherical-excess formula on a sphere of radius `EARTH_RADIUS_M`. Closure is
    implicit: the last vertex connects back to the first. Winding order does
    not matter.

    Fewer than 3 points is "not yet a shape" and yields 0.0 without
    validation. Otherwise every vertex is validated first.

    Raises:
      InvalidCoordinateError for NaN/inf or out-of-range coordinates.
    """

    if len(points) < MIN_POLYGON_POINTS:
        return 0.0

    vertices = validate_polygon(points)

    lat = np.radians(np.array([p.latitude for p in vertices], dtype=np.float64))
    lon = np.radians(np.array([p.longitude for p in vertices], dtype=np.float64))

    # Edge i -> i+1, wrapping the last vertex back to the first.
    lat_next = np.roll(lat, -1)
    lon_next = np.roll(lon, -1)

    running_sum = float(np.sum((lon_next - lon) * (2.0 + np.sin(lat) + np.sin(lat_next))))
    return abs(running_sum) * EARTH_RADIUS_M * EARTH_RADIUS_M / 2.0


def compute_area_ha(points: Sequence[object]) -> float:
    """Enclosed area of a GPS boundary in hectares, rounded to 4 decimals.

    4 decimals of a hectare is a square meter, finer than any phone GPS fix.
    """

    area_ha = round(compute_area_m2(points) / M2_PER_HECTARE, AREA_DECIMALS)
    # Normalises -0.0.
    return area_ha if area_ha > 0.0 else 0.0

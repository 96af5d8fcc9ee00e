from __future__ import annotations

import math
from typing import Sequence

from .boundary_area import EARTH_RADIUS_M
from .points import BoundaryPoint, validate_point, validate_polygon


def haversine_distance_m(a: object, b: object) -> float:
    """Great-circle distance between two points in meters."""

    p = validate_point(a)
    q = validate_point(b)

    lat1 = math.radians(p.latitude)
    lat2 = math.radians(q.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(q.longitude - p.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Clamp rounding noise so asin stays in its domain.
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(h))


def perimeter_m(points: Sequence[object], *, closed: bool = True) -> float:
    """Sum of edge lengths; includes the closing edge when `closed` and n >= 3."""

    if len(points) < 2:
        return 0.0

    vertices = validate_polygon(points)
    total = 0.0
    for prev, cur in zip(vertices, vertices[1:]):
        total += haversine_distance_m(prev, cur)
    if closed and len(vertices) >= 3:
        total += haversine_distance_m(vertices[-1], vertices[0])
    return total


def vertex_mean(vertices: Sequence[BoundaryPoint]) -> BoundaryPoint:
    """Mean latitude/longitude of already-validated, non-empty vertices."""

    if not vertices:
        raise ValueError("vertex_mean needs at least one vertex")
    n = len(vertices)
    return BoundaryPoint(
        latitude=sum(p.latitude for p in vertices) / n,
        longitude=sum(p.longitude for p in vertices) / n,
    )


def center_point(points: Sequence[object]) -> BoundaryPoint | None:
    """Vertex mean of the boundary; None for an empty sequence.

    Good enough for labelling a farm plot on a map. Not a true centroid and not
    meaningful for boundaries that straddle the antimeridian.
    """

    if not points:
        return None
    return vertex_mean(validate_polygon(points))

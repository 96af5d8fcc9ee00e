from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from shapely.errors import ShapelyError
from shapely.geometry import MultiPolygon, Polygon, shape

from .boundary_area import compute_area_m2
from .points import BoundaryPoint, validate_polygon


class BoundaryGeometryError(ValueError):
    """GeoJSON input that does not hold a usable polygon ring."""


def _iter_geometries(obj: object) -> Iterable[Mapping[str, Any]]:
    if not isinstance(obj, Mapping):
        return
    kind = obj.get("type")
    if kind == "FeatureCollection":
        for feat in obj.get("features", []):
            yield from _iter_geometries(feat)
    elif kind == "Feature":
        yield from _iter_geometries(obj.get("geometry") or {})
    elif kind == "GeometryCollection":
        for geom in obj.get("geometries", []):
            yield from _iter_geometries(geom)
    elif "coordinates" in obj:
        yield obj


def _ring_points(polygon: Polygon) -> list[BoundaryPoint]:
    coords = list(polygon.exterior.coords)
    # GeoJSON rings repeat the first vertex; closure is implicit here.
    if len(coords) > 1 and coords[0] == coords[-1]:
        coords = coords[:-1]
    return validate_polygon(
        [{"latitude": c[1], "longitude": c[0]} for c in coords]
    )


def boundary_points_from_geojson(obj: Mapping[str, Any]) -> list[BoundaryPoint]:
    """Extract the boundary ring from a GeoJSON object.

    Accepts a Polygon/MultiPolygon geometry, a Feature, or a FeatureCollection.
    The first polygonal geometry wins; within a MultiPolygon the part with the
    largest geodesic area is used. Holes are ignored: a farm boundary is its
    exterior ring.

    Raises:
      BoundaryGeometryError if no polygon is present.
      InvalidCoordinateError if a vertex is out of range.
    """

    for geom in _iter_geometries(obj):
        if geom.get("type") not in {"Polygon", "MultiPolygon"}:
            continue
        try:
            parsed = shape(geom)
        except (ShapelyError, ValueError, TypeError, AttributeError) as exc:
            raise BoundaryGeometryError(f"Malformed {geom.get('type')} geometry: {exc}") from exc
        if parsed.is_empty:
            continue
        if isinstance(parsed, MultiPolygon):
            rings = [_ring_points(part) for part in parsed.geoms]
            return max(rings, key=compute_area_m2)
        return _ring_points(parsed)

    raise BoundaryGeometryError("GeoJSON contains no Polygon or MultiPolygon geometry")


def load_boundary_geojson(path: str | Path) -> list[BoundaryPoint]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return boundary_points_from_geojson(data)


def load_points_json(path: str | Path) -> list[BoundaryPoint]:
    """Load a JSON point list as exported by the field mapping widgets.

    Either a bare array of point objects or an object with a `points` array
    (optionally nested under `boundary`).
    """

    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, Mapping):
        data = data.get("boundary", data)
        data = data.get("points") if isinstance(data, Mapping) else None
    if not isinstance(data, list):
        raise BoundaryGeometryError(f"No point array found in {path}")
    return validate_polygon(data)


def boundary_to_geojson_geometry(points: Sequence[object]) -> dict[str, Any]:
    """Closed GeoJSON Polygon geometry, `[lon, lat]` order.

    Every input point becomes one ring position and the first position is
    always repeated at the end, so `len(ring) - 1 == len(points)` even when
    the caller already closed the ring or all points coincide.
    """

    vertices = validate_polygon(points)
    ring = [[p.longitude, p.latitude] for p in vertices]
    if ring:
        ring.append(list(ring[0]))
    return {"type": "Polygon", "coordinates": [ring]}


def boundary_to_geojson_feature(
    points: Sequence[object],
    properties: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    return {
        "type": "Feature",
        "properties": dict(properties or {}),
        "geometry": boundary_to_geojson_geometry(points),
    }

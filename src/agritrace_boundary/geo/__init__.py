"""Geodesic primitives for GPS-mapped land boundaries."""

from .boundary_area import (
    AREA_DECIMALS,
    EARTH_RADIUS_M,
    compute_area_ha,
    compute_area_m2,
)
from .distance import center_point, haversine_distance_m, perimeter_m, vertex_mean
from .geojson import (
    BoundaryGeometryError,
    boundary_points_from_geojson,
    boundary_to_geojson_feature,
    boundary_to_geojson_geometry,
    load_boundary_geojson,
    load_points_json,
)
from .points import BoundaryPoint, InvalidCoordinateError, validate_point, validate_polygon

__all__ = [
    "AREA_DECIMALS",
    "EARTH_RADIUS_M",
    "BoundaryGeometryError",
    "BoundaryPoint",
    "InvalidCoordinateError",
    "boundary_points_from_geojson",
    "boundary_to_geojson_feature",
    "boundary_to_geojson_geometry",
    "center_point",
    "compute_area_ha",
    "compute_area_m2",
    "haversine_distance_m",
    "load_boundary_geojson",
    "load_points_json",
    "perimeter_m",
    "validate_point",
    "validate_polygon",
    "vertex_mean",
]

"""Geodesic boundary toolkit for AgriTrace360 farm-plot mapping.

The shared entry point is `compute_area_ha`: every mapping widget and report
generator calls this one function instead of carrying its own copy.
"""

from .geo.boundary_area import compute_area_ha, compute_area_m2
from .geo.points import BoundaryPoint, InvalidCoordinateError

__all__ = [
    "BoundaryPoint",
    "InvalidCoordinateError",
    "compute_area_ha",
    "compute_area_m2",
]

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from agritrace_boundary.geo.boundary_area import MIN_POLYGON_POINTS, compute_area_ha
from agritrace_boundary.geo.distance import haversine_distance_m, perimeter_m, vertex_mean
from agritrace_boundary.geo.points import BoundaryPoint, validate_point, validate_polygon


LOGGER = logging.getLogger(__name__)


class InsufficientPointsError(ValueError):
    """Raised when completing a boundary that has fewer than 3 points."""


class RecorderClosedError(RuntimeError):
    """Raised when adding points to a boundary that is already complete."""


@dataclass(frozen=True)
class RecorderConfig:
    """Acceptance rules for incoming GPS fixes.

    Defaults match the field mapping widgets: 50 vertices max, fixes worse
    than 10 m are skipped, and a new vertex must be at least 5 m from the
    previous one.
    """

    max_points: int = 50
    min_accuracy_m: float = 10.0
    min_distance_m: float = 5.0

    def __post_init__(self) -> None:
        if self.max_points < MIN_POLYGON_POINTS:
            raise ValueError(f"max_points must be >= {MIN_POLYGON_POINTS}")
        if self.min_accuracy_m <= 0:
            raise ValueError("min_accuracy_m must be positive")
        if self.min_distance_m < 0:
            raise ValueError("min_distance_m must be >= 0")


@dataclass(frozen=True)
class BoundaryMapping:
    """A completed boundary with its derived measurements."""

    name: str
    points: tuple[BoundaryPoint, ...]
    area_ha: float
    perimeter_m: float
    center: BoundaryPoint
    average_accuracy_m: float | None = None

    @property
    def point_count(self) -> int:
        return len(self.points)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "points": [p.to_dict() for p in self.points],
            "point_count": self.point_count,
            "area_ha": self.area_ha,
            "perimeter_m": round(self.perimeter_m, 1),
            "center": {"latitude": self.center.latitude, "longitude": self.center.longitude},
            "average_accuracy_m": self.average_accuracy_m,
        }


def summarize_boundary(name: str, points: Sequence[object]) -> BoundaryMapping:
    """Derive area, perimeter, center and mean accuracy for a closed boundary.

    Points may be `BoundaryPoint`s, mappings or point-like objects.

    Raises:
      InvalidCoordinateError for malformed coordinates.
      InsufficientPointsError for fewer than 3 points.
    """

    vertices = validate_polygon(points)
    if len(vertices) < MIN_POLYGON_POINTS:
        raise InsufficientPointsError(
            f"Need at least {MIN_POLYGON_POINTS} points to complete a boundary, got {len(vertices)}"
        )

    accuracies = [p.accuracy for p in vertices if p.accuracy is not None]

    return BoundaryMapping(
        name=name,
        points=tuple(vertices),
        area_ha=compute_area_ha(vertices),
        perimeter_m=perimeter_m(vertices),
        center=vertex_mean(vertices),
        average_accuracy_m=(sum(accuracies) / len(accuracies)) if accuracies else None,
    )


@dataclass
class BoundaryRecorder:
    """Collects GPS fixes into a boundary, one walk around a plot at a time.

    Each recorder is an explicit object owned by its caller; there is no
    process-wide mapping state.
    """

    name: str
    config: RecorderConfig = field(default_factory=RecorderConfig)
    _points: list[BoundaryPoint] = field(default_factory=list, init=False, repr=False)
    _completed: BoundaryMapping | None = field(default=None, init=False, repr=False)

    @property
    def points(self) -> tuple[BoundaryPoint, ...]:
        return tuple(self._points)

    @property
    def is_complete(self) -> bool:
        return self._completed is not None

    def current_area_ha(self) -> float:
        """Running area while mapping; 0.0 until the third vertex."""

        return compute_area_ha(self._points)

    def add_point(self, point: object) -> bool:
        """Offer a GPS fix. Returns True when it became a boundary vertex.

        Raises:
          InvalidCoordinateError for malformed coordinates.
          RecorderClosedError once the boundary is complete.
        """

        if self._completed is not None:
            raise RecorderClosedError(f"Boundary {self.name!r} is already complete")

        candidate = validate_point(point)

        if len(self._points) >= self.config.max_points:
            LOGGER.debug("%s: max_points=%d reached, fix skipped", self.name, self.config.max_points)
            return False

        if candidate.accuracy is not None and candidate.accuracy > self.config.min_accuracy_m:
            LOGGER.debug(
                "%s: fix accuracy %.1fm worse than %.1fm, skipped",
                self.name,
                candidate.accuracy,
                self.config.min_accuracy_m,
            )
            return False

        if self._points:
            gap_m = haversine_distance_m(self._points[-1], candidate)
            if gap_m < self.config.min_distance_m:
                LOGGER.debug(
                    "%s: fix %.1fm from last vertex (< %.1fm), skipped",
                    self.name,
                    gap_m,
                    self.config.min_distance_m,
                )
                return False

        self._points.append(candidate)
        return True

    def remove_last_point(self) -> BoundaryPoint | None:
        if self._completed is not None:
            raise RecorderClosedError(f"Boundary {self.name!r} is already complete")
        if not self._points:
            return None
        return self._points.pop()

    def complete(self) -> BoundaryMapping:
        if self._completed is None:
            self._completed = summarize_boundary(self.name, list(self._points))
            LOGGER.info(
                "Boundary %s complete: %d points, %.4f ha, %.1f m perimeter",
                self.name,
                self._completed.point_count,
                self._completed.area_ha,
                self._completed.perimeter_m,
            )
        return self._completed

    def reset(self) -> None:
        self._points.clear()
        self._completed = None

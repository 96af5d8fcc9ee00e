from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping


LAT_RANGE = (-90.0, 90.0)
LON_RANGE = (-180.0, 180.0)

_FIELD_ALIASES = {
    "latitude": ("latitude", "lat"),
    "longitude": ("longitude", "lng", "lon"),
}


class InvalidCoordinateError(ValueError):
    """A latitude or longitude is missing, non-finite, or outside its range."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: object = None,
        index: int | None = None,
    ) -> None:
        if index is not None:
            message = f"point {index}: {message}"
        super().__init__(message)
        self.field = field
        self.value = value
        self.index = index


@dataclass(frozen=True)
class BoundaryPoint:
    """One GPS-sampled vertex of a mapped land boundary.

    `accuracy` (meters) and `timestamp` are capture metadata; they never take
    part in geometry calculations.
    """

    latitude: float
    longitude: float
    accuracy: float | None = None
    timestamp: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"latitude": self.latitude, "longitude": self.longitude}
        if self.accuracy is not None:
            out["accuracy"] = self.accuracy
        if self.timestamp is not None:
            out["timestamp"] = self.timestamp.isoformat()
        return out


def _read_field(point: object, field: str) -> object:
    for name in _FIELD_ALIASES[field]:
        if isinstance(point, Mapping):
            if name in point:
                return point[name]
        elif hasattr(point, name):
            return getattr(point, name)
    raise InvalidCoordinateError(f"missing {field}", field=field)


def _coerce_degrees(value: object, *, field: str, bounds: tuple[float, float]) -> float:
    # bool is an int subclass; a True latitude is never a real reading.
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidCoordinateError(
            f"{field} must be a number, got {type(value).__name__}",
            field=field,
            value=value,
        )
    degrees = float(value)
    if not math.isfinite(degrees):
        raise InvalidCoordinateError(f"{field} is not finite: {degrees}", field=field, value=value)
    lo, hi = bounds
    if degrees < lo or degrees > hi:
        raise InvalidCoordinateError(
            f"{field} {degrees} outside [{lo:g}, {hi:g}]",
            field=field,
            value=value,
        )
    return degrees


def _optional_accuracy(point: object) -> float | None:
    if isinstance(point, Mapping):
        value = point.get("accuracy")
    else:
        value = getattr(point, "accuracy", None)
    if value is None or isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    value = float(value)
    return value if math.isfinite(value) and value >= 0 else None


def _optional_timestamp(point: object) -> datetime | None:
    if isinstance(point, Mapping):
        value = point.get("timestamp")
    else:
        value = getattr(point, "timestamp", None)
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def validate_point(point: object, *, index: int | None = None) -> BoundaryPoint:
    """Coerce a point-like object into a validated `BoundaryPoint`.

    Accepts a `BoundaryPoint`, a mapping with `latitude`/`longitude` keys
    (`lat`/`lng`/`lon` also recognised), or any object exposing those
    attributes.

    Raises:
      InvalidCoordinateError if a coordinate is missing, non-numeric, NaN/inf,
      or out of range.
    """

    try:
        lat = _coerce_degrees(_read_field(point, "latitude"), field="latitude", bounds=LAT_RANGE)
        lon = _coerce_degrees(_read_field(point, "longitude"), field="longitude", bounds=LON_RANGE)
    except InvalidCoordinateError as exc:
        if index is None:
            raise
        raise InvalidCoordinateError(
            str(exc), field=exc.field, value=exc.value, index=index
        ) from None

    if isinstance(point, BoundaryPoint):
        return point

    return BoundaryPoint(
        latitude=lat,
        longitude=lon,
        accuracy=_optional_accuracy(point),
        timestamp=_optional_timestamp(point),
    )


def validate_polygon(points: Iterable[object]) -> list[BoundaryPoint]:
    """Validate every vertex; errors carry the offending vertex index."""

    return [validate_point(p, index=i) for i, p in enumerate(points)]

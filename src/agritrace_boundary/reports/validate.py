from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

import jsonschema
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from agritrace_boundary.geo.boundary_area import MIN_POLYGON_POINTS


def _find_repo_root(start: Path) -> Path:
    current = start
    for _ in range(10):
        if (current / "pyproject.toml").exists() and (current / "schemas").exists():
            return current
        if current.parent == current:
            break
        current = current.parent
    raise RuntimeError("Could not locate repo root (pyproject.toml + schemas/) from: " + str(start))


REPORT_SCHEMA = "boundary_report_v1"
MANIFEST_SCHEMA = "bundle_manifest_v1"


def _default_schema_path(schema_name: str) -> Path:
    repo_root = _find_repo_root(Path(__file__).resolve())
    return repo_root / "schemas" / "reports" / f"{schema_name}.schema.json"


def load_schema(
    schema_path: str | Path | None = None,
    *,
    schema_name: str = REPORT_SCHEMA,
) -> dict[str, Any]:
    path = Path(schema_path) if schema_path is not None else _default_schema_path(schema_name)
    return json.loads(path.read_text(encoding="utf-8"))


def _schema_validate(obj: Mapping[str, Any], schema: dict[str, Any]) -> None:
    validator = Draft202012Validator(schema, format_checker=jsonschema.FormatChecker())
    validator.validate(dict(obj))


def validate_boundary_report_v1(
    report: Mapping[str, Any],
    *,
    schema_path: str | Path | None = None,
) -> None:
    """Validate a boundary report against the v1 schema plus cross-field rules.

    Raises:
      jsonschema.exceptions.ValidationError if invalid.
    """

    _schema_validate(report, load_schema(schema_path, schema_name=REPORT_SCHEMA))
    _validate_geometry_matches_metrics(report)


def validate_bundle_manifest_v1(
    manifest: Mapping[str, Any],
    *,
    schema_path: str | Path | None = None,
) -> None:
    """Validate a bundle manifest: schema, stable artifact order, and a report entry.

    Raises:
      jsonschema.exceptions.ValidationError if invalid.
    """

    _schema_validate(manifest, load_schema(schema_path, schema_name=MANIFEST_SCHEMA))

    relpaths = [a["relpath"] for a in manifest["artifacts"]]
    if relpaths != sorted(set(relpaths)):
        raise ValidationError(f"artifacts must be unique and sorted by relpath: {relpaths}")

    boundary_id = manifest["boundary"]["boundary_id"]
    report_relpaths = {
        a["relpath"] for a in manifest["artifacts"] if a["report_type"] == REPORT_SCHEMA
    }
    expected = f"reports/{REPORT_SCHEMA}/{boundary_id}.json"
    if expected not in report_relpaths:
        raise ValidationError(f"Manifest is missing the boundary report artifact: {expected}")


def _validate_geometry_matches_metrics(report: Mapping[str, Any]) -> None:
    metrics = report["metrics"]
    ring = report["geometry"]["coordinates"][0]

    if ring[0] != ring[-1]:
        raise ValidationError("geometry ring must be closed (first == last)")

    # The closing coordinate is not a vertex.
    vertex_count = len(ring) - 1
    if metrics["vertex_count"] != vertex_count:
        raise ValidationError(
            f"metrics.vertex_count={metrics['vertex_count']} but geometry has {vertex_count} vertices"
        )
    if vertex_count < MIN_POLYGON_POINTS:
        raise ValidationError(f"boundary needs at least {MIN_POLYGON_POINTS} vertices")

    for lon, lat in (pos[:2] for pos in ring):
        if not (-180.0 <= lon <= 180.0 and -90.0 <= lat <= 90.0):
            raise ValidationError(f"geometry position out of range: [{lon}, {lat}]")

    area_ha = metrics["area_ha"]
    area_m2 = metrics["area_m2"]
    # area_ha is rounded to 1 m^2; area_m2 to 1 cm^2.
    if abs(area_ha * 10_000.0 - area_m2) > 1.0:
        raise ValidationError(
            f"metrics.area_ha={area_ha} inconsistent with metrics.area_m2={area_m2}"
        )


def validate_boundary_report_v1_file(
    json_path: str | Path,
    *,
    schema_path: str | Path | None = None,
) -> dict[str, Any]:
    """Load and validate a report JSON file; returns the parsed JSON."""

    obj = json.loads(Path(json_path).read_text(encoding="utf-8"))
    validate_boundary_report_v1(obj, schema_path=schema_path)
    return obj

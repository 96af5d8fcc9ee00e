from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pyproj import Geod

from agritrace_boundary.geo.boundary_area import AREA_DECIMALS, EARTH_RADIUS_M, compute_area_m2
from agritrace_boundary.geo.geojson import boundary_to_geojson_feature, boundary_to_geojson_geometry
from agritrace_boundary.mapping.recorder import BoundaryMapping

from .determinism import stable_float, utc_now_iso, utc_today
from .layout import BundleLayout, sanitize_id
from .pipeline import ReportPipeline
from .types import BoundaryBundleManifest, ReportType
from .validate import validate_boundary_report_v1


LOGGER = logging.getLogger(__name__)

COORD_DECIMALS = 7
LENGTH_DECIMALS = 2
_WGS84 = Geod(ellps="WGS84")


def ellipsoidal_area_ha(mapping: BoundaryMapping) -> float:
    """WGS84 ellipsoid area via pyproj, used as a cross-check value."""

    lons = [p.longitude for p in mapping.points]
    lats = [p.latitude for p in mapping.points]
    area_m2, _ = _WGS84.polygon_area_perimeter(lons, lats)
    return abs(area_m2) / 10_000.0


def build_boundary_report(
    mapping: BoundaryMapping,
    *,
    boundary_id: str,
    generated_at_utc: str | None = None,
) -> dict[str, Any]:
    """Assemble a `boundary_report_v1` object for a completed boundary."""

    area_m2 = compute_area_m2(mapping.points)
    crosscheck_ha = ellipsoidal_area_ha(mapping)
    relative_difference = (
        (mapping.area_ha - crosscheck_ha) / crosscheck_ha if crosscheck_ha > 0 else 0.0
    )

    return {
        "report_version": ReportType.BOUNDARY_REPORT_V1.value,
        "boundary_id": boundary_id,
        "name": mapping.name,
        "generated_at_utc": generated_at_utc or utc_now_iso(),
        "geometry": boundary_to_geojson_geometry(mapping.points),
        "metrics": {
            "area_ha": mapping.area_ha,
            "area_m2": stable_float(area_m2, LENGTH_DECIMALS),
            "perimeter_m": stable_float(mapping.perimeter_m, LENGTH_DECIMALS),
            "vertex_count": mapping.point_count,
            "average_accuracy_m": (
                stable_float(mapping.average_accuracy_m, LENGTH_DECIMALS)
                if mapping.average_accuracy_m is not None
                else None
            ),
        },
        "centroid": {
            "latitude": stable_float(mapping.center.latitude, COORD_DECIMALS),
            "longitude": stable_float(mapping.center.longitude, COORD_DECIMALS),
        },
        "method": {
            "area_formula": "spherical_excess",
            "distance_formula": "haversine",
            "earth_radius_m": EARTH_RADIUS_M,
            "area_decimals": AREA_DECIMALS,
        },
        "crosscheck": {
            "ellipsoid": "WGS84",
            "area_ha": stable_float(crosscheck_ha, AREA_DECIMALS),
            "relative_difference": stable_float(relative_difference, 6),
        },
    }


@dataclass(frozen=True)
class BoundaryReportResult:
    layout: BundleLayout
    report: dict[str, Any]
    report_path: Path
    geojson_path: Path
    manifest: BoundaryBundleManifest


def write_boundary_report(
    mapping: BoundaryMapping,
    *,
    pipeline: ReportPipeline,
    boundary_id: str,
    bundle_id: str | None = None,
    bundle_date: str | None = None,
    generated_at_utc: str | None = None,
) -> BoundaryReportResult:
    """Write report JSON, boundary GeoJSON and manifest into a bundle.

    Layout:
      <root>/<date>/<bundle_id>/inputs/boundary.geojson
      <root>/<date>/<bundle_id>/reports/boundary_report_v1/<boundary_id>.json
      <root>/<date>/<bundle_id>/bundle_manifest.json

    The report is schema-validated before anything is written.
    """

    boundary_id = sanitize_id(boundary_id)
    bundle_id = sanitize_id(bundle_id or boundary_id)
    generated_at_utc = generated_at_utc or utc_now_iso()

    report = build_boundary_report(
        mapping,
        boundary_id=boundary_id,
        generated_at_utc=generated_at_utc,
    )
    validate_boundary_report_v1(report)

    layout = pipeline.bundle_layout(
        bundle_date=bundle_date or utc_today(),
        bundle_id=bundle_id,
    )

    geojson_path = layout.inputs_dir / "boundary.geojson"
    feature = boundary_to_geojson_feature(
        mapping.points,
        properties={"boundary_id": boundary_id, "name": mapping.name, "area_ha": mapping.area_ha},
    )
    report_path = layout.reports_dir / ReportType.BOUNDARY_REPORT_V1.value / f"{boundary_id}.json"

    artifacts = [
        pipeline.write_artifact(
            layout=layout,
            path=geojson_path,
            obj=feature,
            report_type=ReportType.BOUNDARY_GEOJSON_V1,
            media_type="application/geo+json",
        ),
        pipeline.write_artifact(
            layout=layout,
            path=report_path,
            obj=report,
            report_type=ReportType.BOUNDARY_REPORT_V1,
        ),
    ]

    manifest = pipeline.write_manifest(
        layout=layout,
        report=report,
        artifacts=artifacts,
        created_utc=generated_at_utc,
    )

    LOGGER.info("Wrote boundary bundle %s (%d artifacts)", layout.bundle_root, len(artifacts))
    return BoundaryReportResult(
        layout=layout,
        report=report,
        report_path=report_path,
        geojson_path=geojson_path,
        manifest=manifest,
    )

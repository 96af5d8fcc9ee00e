from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


MANIFEST_VERSION = "bundle_manifest_v1"


class ReportType(str, Enum):
    """Files a boundary bundle can hold."""

    BOUNDARY_REPORT_V1 = "boundary_report_v1"
    BOUNDARY_GEOJSON_V1 = "boundary_geojson_v1"


@dataclass(frozen=True)
class BundleArtifact:
    """One file inside a bundle, addressed relative to the bundle root."""

    relpath: str
    report_type: ReportType
    media_type: str
    sha256: str
    size_bytes: int

    def to_json(self) -> dict[str, Any]:
        return {
            "relpath": self.relpath,
            "report_type": self.report_type.value,
            "media_type": self.media_type,
            "sha256": self.sha256,
            "size_bytes": self.size_bytes,
        }


@dataclass(frozen=True)
class BoundarySummary:
    """The headline figures a manifest reader needs without opening the report."""

    boundary_id: str
    area_ha: float
    area_formula: str
    vertex_count: int

    @classmethod
    def from_report(cls, report: Mapping[str, Any]) -> "BoundarySummary":
        return cls(
            boundary_id=report["boundary_id"],
            area_ha=report["metrics"]["area_ha"],
            area_formula=report["method"]["area_formula"],
            vertex_count=report["metrics"]["vertex_count"],
        )


@dataclass(frozen=True)
class BoundaryBundleManifest:
    bundle_date: str  # YYYY-MM-DD
    bundle_id: str
    created_utc: str  # ISO-8601 timestamp, UTC
    generator: Mapping[str, Any]
    boundary: BoundarySummary
    artifacts: tuple[BundleArtifact, ...]

    def to_json(self) -> dict[str, Any]:
        return {
            "manifest_version": MANIFEST_VERSION,
            "bundle_date": self.bundle_date,
            "bundle_id": self.bundle_id,
            "created_utc": self.created_utc,
            "generator": dict(self.generator),
            "boundary": {
                "boundary_id": self.boundary.boundary_id,
                "area_ha": self.boundary.area_ha,
                "area_formula": self.boundary.area_formula,
                "vertex_count": self.boundary.vertex_count,
            },
            "artifacts": [a.to_json() for a in self.artifacts],
        }

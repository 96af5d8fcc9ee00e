"""Deterministic, inspectable boundary evidence bundles.

A bundle holds the mapped boundary as GeoJSON, a schema-validated
`boundary_report_v1` JSON, and a manifest with sha256 checksums, so compliance
documents can cite an area figure together with the geometry it came from.
"""

from .boundary_report import BoundaryReportResult, build_boundary_report, write_boundary_report
from .layout import BundleLayout, BundleRef, resolve_audit_root
from .pipeline import ReportPipeline
from .types import BoundaryBundleManifest, BundleArtifact, ReportType
from .validate import (
    validate_boundary_report_v1,
    validate_boundary_report_v1_file,
    validate_bundle_manifest_v1,
)

__all__ = [
    "BoundaryBundleManifest",
    "BoundaryReportResult",
    "BundleArtifact",
    "BundleLayout",
    "BundleRef",
    "ReportPipeline",
    "ReportType",
    "build_boundary_report",
    "resolve_audit_root",
    "validate_boundary_report_v1",
    "validate_boundary_report_v1_file",
    "validate_bundle_manifest_v1",
    "write_boundary_report",
]

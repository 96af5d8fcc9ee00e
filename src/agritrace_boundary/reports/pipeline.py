from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping

from .determinism import utc_now_iso, write_json
from .layout import BundleLayout, BundleRef, resolve_audit_root
from .types import BoundaryBundleManifest, BoundarySummary, BundleArtifact, ReportType
from .validate import validate_bundle_manifest_v1


class ReportPipeline:
    """Writes boundary bundles under an audit root.

    Callers write each file through `write_artifact`, which hashes the exact
    bytes on disk, then seal the bundle with `write_manifest`.
    """

    def __init__(
        self,
        *,
        audit_root: str | Path | None = None,
        generator_meta: Mapping[str, Any] | None = None,
    ) -> None:
        self._audit_root = resolve_audit_root(audit_root)
        self._generator = {"repo": "agritrace-boundary", **dict(generator_meta or {})}

    def bundle_layout(self, *, bundle_date: str, bundle_id: str) -> BundleLayout:
        return BundleLayout(
            audit_root=self._audit_root,
            ref=BundleRef(bundle_date=bundle_date, bundle_id=bundle_id),
        )

    def write_artifact(
        self,
        *,
        layout: BundleLayout,
        path: Path,
        obj: object,
        report_type: ReportType,
        media_type: str = "application/json",
    ) -> BundleArtifact:
        sha256 = write_json(path, obj)
        return BundleArtifact(
            relpath=path.relative_to(layout.bundle_root).as_posix(),
            report_type=report_type,
            media_type=media_type,
            sha256=sha256,
            size_bytes=path.stat().st_size,
        )

    def write_manifest(
        self,
        *,
        layout: BundleLayout,
        report: Mapping[str, Any],
        artifacts: Iterable[BundleArtifact],
        created_utc: str | None = None,
    ) -> BoundaryBundleManifest:
        """Validate and write `bundle_manifest.json`; artifacts sorted by relpath."""

        manifest = BoundaryBundleManifest(
            bundle_date=layout.ref.bundle_date,
            bundle_id=layout.ref.bundle_id,
            created_utc=created_utc or utc_now_iso(),
            generator=self._generator,
            boundary=BoundarySummary.from_report(report),
            artifacts=tuple(sorted(artifacts, key=lambda a: a.relpath)),
        )

        payload = manifest.to_json()
        validate_bundle_manifest_v1(payload)
        write_json(layout.manifest_path, payload)
        return manifest

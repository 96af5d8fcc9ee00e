from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest
from jsonschema.exceptions import ValidationError

from agritrace_boundary.mapping.recorder import summarize_boundary
from agritrace_boundary.reports.boundary_report import (
    build_boundary_report,
    ellipsoidal_area_ha,
    write_boundary_report,
)
from agritrace_boundary.reports.determinism import sha256_file
from agritrace_boundary.reports.layout import AUDIT_ROOT_ENV, resolve_audit_root
from agritrace_boundary.reports.pipeline import ReportPipeline
from agritrace_boundary.reports.validate import (
    validate_boundary_report_v1,
    validate_boundary_report_v1_file,
    validate_bundle_manifest_v1,
)

FIXED_TS = "2025-03-01T10:00:00+00:00"


@pytest.fixture
def mapping(liberia_square):
    points = [dict(p, accuracy=4.0) for p in liberia_square]
    return summarize_boundary("Bong County cocoa plot", points)


def test_build_report_is_schema_valid(mapping) -> None:
    report = build_boundary_report(mapping, boundary_id="cocoa-1", generated_at_utc=FIXED_TS)

    validate_boundary_report_v1(report)

    assert report["report_version"] == "boundary_report_v1"
    assert report["metrics"]["area_ha"] == mapping.area_ha
    assert report["metrics"]["vertex_count"] == 4
    assert report["metrics"]["average_accuracy_m"] == 4.0
    assert report["method"]["area_decimals"] == 4
    assert len(report["geometry"]["coordinates"][0]) == 5


def test_crosscheck_within_one_percent(mapping) -> None:
    report = build_boundary_report(mapping, boundary_id="cocoa-1", generated_at_utc=FIXED_TS)

    assert report["crosscheck"]["area_ha"] == pytest.approx(ellipsoidal_area_ha(mapping), abs=1e-4)
    assert abs(report["crosscheck"]["relative_difference"]) < 0.01


def test_vertex_count_mismatch_is_rejected(mapping) -> None:
    report = build_boundary_report(mapping, boundary_id="cocoa-1", generated_at_utc=FIXED_TS)
    bad = copy.deepcopy(report)
    bad["metrics"]["vertex_count"] = 5

    with pytest.raises(ValidationError, match="vertex_count"):
        validate_boundary_report_v1(bad)


def test_inconsistent_area_is_rejected(mapping) -> None:
    report = build_boundary_report(mapping, boundary_id="cocoa-1", generated_at_utc=FIXED_TS)
    bad = copy.deepcopy(report)
    bad["metrics"]["area_ha"] = report["metrics"]["area_ha"] * 2

    with pytest.raises(ValidationError, match="area_ha"):
        validate_boundary_report_v1(bad)


def test_negative_area_fails_schema(mapping) -> None:
    report = build_boundary_report(mapping, boundary_id="cocoa-1", generated_at_utc=FIXED_TS)
    bad = copy.deepcopy(report)
    bad["metrics"]["area_ha"] = -1.0

    with pytest.raises(ValidationError):
        validate_boundary_report_v1(bad)


def test_write_bundle_layout(tmp_path: Path, mapping) -> None:
    pipeline = ReportPipeline(audit_root=tmp_path / "audit")

    result = write_boundary_report(
        mapping,
        pipeline=pipeline,
        boundary_id="cocoa 1",
        bundle_id="bundle-001",
        bundle_date="2025-03-01",
        generated_at_utc=FIXED_TS,
    )

    root = tmp_path / "audit" / "2025-03-01" / "bundle-001"
    assert result.layout.bundle_root == root
    assert result.report_path == root / "reports" / "boundary_report_v1" / "cocoa_1.json"
    assert result.geojson_path == root / "inputs" / "boundary.geojson"

    on_disk = validate_boundary_report_v1_file(result.report_path)
    assert on_disk == result.report

    manifest = json.loads((root / "bundle_manifest.json").read_text(encoding="utf-8"))
    relpaths = [a["relpath"] for a in manifest["artifacts"]]
    assert relpaths == sorted(relpaths)
    assert relpaths == ["inputs/boundary.geojson", "reports/boundary_report_v1/cocoa_1.json"]
    for artifact in manifest["artifacts"]:
        assert artifact["sha256"] == sha256_file(root / artifact["relpath"])
    validate_bundle_manifest_v1(manifest)
    assert manifest["manifest_version"] == "bundle_manifest_v1"
    assert manifest["boundary"] == {
        "boundary_id": "cocoa_1",
        "area_ha": mapping.area_ha,
        "area_formula": "spherical_excess",
        "vertex_count": 4,
    }
    assert manifest == result.manifest.to_json()


def test_bundle_bytes_are_deterministic(tmp_path: Path, mapping) -> None:
    outputs = []
    for run in ("a", "b"):
        pipeline = ReportPipeline(audit_root=tmp_path / run)
        result = write_boundary_report(
            mapping,
            pipeline=pipeline,
            boundary_id="cocoa-1",
            bundle_date="2025-03-01",
            generated_at_utc=FIXED_TS,
        )
        outputs.append(
            (
                result.layout.manifest_path.read_bytes(),
                result.report_path.read_bytes(),
                result.geojson_path.read_bytes(),
            )
        )

    assert outputs[0] == outputs[1]


def test_audit_root_resolution(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv(AUDIT_ROOT_ENV, raising=False)
    assert resolve_audit_root() == Path("audit")

    monkeypatch.setenv(AUDIT_ROOT_ENV, str(tmp_path / "env"))
    assert resolve_audit_root() == tmp_path / "env"
    assert resolve_audit_root(tmp_path / "explicit") == tmp_path / "explicit"


@pytest.fixture
def bundle_manifest(tmp_path: Path, mapping) -> dict:
    result = write_boundary_report(
        mapping,
        pipeline=ReportPipeline(audit_root=tmp_path),
        boundary_id="cocoa-1",
        bundle_date="2025-03-01",
        generated_at_utc=FIXED_TS,
    )
    return json.loads(result.layout.manifest_path.read_text(encoding="utf-8"))


def test_unsorted_manifest_artifacts_are_rejected(bundle_manifest) -> None:
    bad = copy.deepcopy(bundle_manifest)
    bad["artifacts"].reverse()

    with pytest.raises(ValidationError, match="sorted"):
        validate_bundle_manifest_v1(bad)


def test_manifest_without_report_artifact_is_rejected(bundle_manifest) -> None:
    bad = copy.deepcopy(bundle_manifest)
    bad["artifacts"] = [a for a in bad["artifacts"] if a["report_type"] != "boundary_report_v1"]

    with pytest.raises(ValidationError, match="boundary report artifact"):
        validate_bundle_manifest_v1(bad)


@pytest.mark.parametrize(
    "field, value",
    [
        ("sha256", "not-a-digest"),
        ("report_type", "legacy_report"),
        ("size_bytes", -1),
    ],
)
def test_malformed_manifest_artifact_fails_schema(bundle_manifest, field, value) -> None:
    bad = copy.deepcopy(bundle_manifest)
    bad["artifacts"][0][field] = value

    with pytest.raises(ValidationError):
        validate_bundle_manifest_v1(bad)


def test_closed_ring_input_writes_valid_bundle(tmp_path: Path, liberia_square) -> None:
    closed = summarize_boundary("closed walk", [*liberia_square, liberia_square[0]])

    result = write_boundary_report(
        closed,
        pipeline=ReportPipeline(audit_root=tmp_path),
        boundary_id="closed",
        bundle_date="2025-03-01",
        generated_at_utc=FIXED_TS,
    )

    ring = result.report["geometry"]["coordinates"][0]
    assert result.report["metrics"]["vertex_count"] == 5
    assert len(ring) == 6
    assert ring[0] == ring[-1]
    validate_boundary_report_v1_file(result.report_path)


def test_coincident_points_write_valid_bundle(tmp_path: Path) -> None:
    same = summarize_boundary("single fix", [{"latitude": 7.0, "longitude": -9.5}] * 4)

    result = write_boundary_report(
        same,
        pipeline=ReportPipeline(audit_root=tmp_path),
        boundary_id="same",
        bundle_date="2025-03-01",
        generated_at_utc=FIXED_TS,
    )

    assert result.report["metrics"]["area_ha"] == 0.0
    assert result.report["metrics"]["vertex_count"] == 4
    assert len(result.report["geometry"]["coordinates"][0]) == 5
    validate_boundary_report_v1_file(result.report_path)

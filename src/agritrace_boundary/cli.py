from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jsonschema.exceptions import ValidationError

from agritrace_boundary.geo.geojson import load_boundary_geojson, load_points_json
from agritrace_boundary.geo.points import BoundaryPoint
from agritrace_boundary.mapping.recorder import summarize_boundary
from agritrace_boundary.reports.boundary_report import write_boundary_report
from agritrace_boundary.reports.layout import sanitize_id
from agritrace_boundary.reports.pipeline import ReportPipeline


LOGGER = logging.getLogger(__name__)

EXIT_INVALID_INPUT = 2


def _utc_now_compact() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).strftime("%Y%m%dT%H%M%SZ")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="python -m agritrace_boundary.cli",
        description="Compute the geodesic area of a mapped farm boundary and write an evidence bundle.",
    )

    g = p.add_mutually_exclusive_group(required=True)
    g.add_argument("--boundary-geojson", help="Path to a GeoJSON Polygon/Feature/FeatureCollection")
    g.add_argument(
        "--points-json",
        help="Path to a JSON array of {latitude, longitude, accuracy?, timestamp?} points",
    )

    p.add_argument(
        "--boundary-id",
        help="Boundary identifier (default: input file stem).",
    )
    p.add_argument("--name", help="Human-readable boundary name (default: boundary id).")
    p.add_argument(
        "--bundle-id",
        help="Optional bundle id. If omitted, derived from boundary-id + UTC timestamp.",
    )
    p.add_argument(
        "--audit-root",
        help="Bundle output root (defaults to AGRITRACE_AUDIT_ROOT, then ./audit).",
    )
    p.add_argument(
        "--no-bundle",
        action="store_true",
        help="Only print the computed measurements; write nothing.",
    )
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )
    return p


def _load_points(args: argparse.Namespace) -> tuple[list[BoundaryPoint], Path]:
    if args.boundary_geojson:
        path = Path(args.boundary_geojson)
        return load_boundary_geojson(path), path
    path = Path(args.points_json)
    return load_points_json(path), path


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        points, source_path = _load_points(args)
        boundary_id = sanitize_id(args.boundary_id or source_path.stem)
        mapping = summarize_boundary(args.name or boundary_id, points)
    except (OSError, json.JSONDecodeError, ValueError) as exc:
        # InvalidCoordinateError, BoundaryGeometryError and
        # InsufficientPointsError are all ValueErrors.
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    summary: dict[str, Any] = {
        "boundary_id": boundary_id,
        **mapping.to_dict(),
    }
    summary.pop("points")

    if not args.no_bundle:
        bundle_id = args.bundle_id or f"{boundary_id}-{_utc_now_compact()}"
        pipeline = ReportPipeline(
            audit_root=args.audit_root,
            generator_meta={"entrypoint": "agritrace_boundary.cli"},
        )
        try:
            result = write_boundary_report(
                mapping,
                pipeline=pipeline,
                boundary_id=boundary_id,
                bundle_id=bundle_id,
            )
        except (ValidationError, ValueError) as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return EXIT_INVALID_INPUT
        summary["bundle_dir"] = result.layout.bundle_root.as_posix()
        summary["report_path"] = result.report_path.as_posix()
        LOGGER.info("Report written: %s", result.report_path)

    print(json.dumps(summary, indent=2, sort_keys=True), flush=True)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path


AUDIT_ROOT_ENV = "AGRITRACE_AUDIT_ROOT"
DEFAULT_AUDIT_ROOT = Path("audit")


def resolve_audit_root(explicit: str | os.PathLike[str] | None = None) -> Path:
    """Resolve the evidence/audit root directory.

    Precedence: explicit argument, then `AGRITRACE_AUDIT_ROOT`, then a
    repo-relative `audit/` folder (gitignored).

    Bundles are written under: <AUDIT_ROOT>/<YYYY-MM-DD>/<bundle_id>/
    """

    if explicit is not None:
        return Path(explicit)

    env_value = os.environ.get(AUDIT_ROOT_ENV)
    if env_value:
        return Path(env_value)

    return DEFAULT_AUDIT_ROOT


def sanitize_id(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("empty id")
    return re.sub(r"[^A-Za-z0-9._-]+", "_", value)


@dataclass(frozen=True)
class BundleRef:
    bundle_date: str  # YYYY-MM-DD
    bundle_id: str


@dataclass(frozen=True)
class BundleLayout:
    """Filesystem layout for a boundary evidence bundle."""

    audit_root: Path
    ref: BundleRef

    @property
    def bundle_root(self) -> Path:
        return self.audit_root / self.ref.bundle_date / self.ref.bundle_id

    @property
    def inputs_dir(self) -> Path:
        return self.bundle_root / "inputs"

    @property
    def reports_dir(self) -> Path:
        return self.bundle_root / "reports"

    @property
    def manifest_path(self) -> Path:
        return self.bundle_root / "bundle_manifest.json"

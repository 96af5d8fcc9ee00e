from __future__ import annotations

import hashlib
import json
from datetime import datetime, timezone
from pathlib import Path


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def utc_today() -> str:
    return datetime.now(timezone.utc).date().strftime("%Y-%m-%d")


def canonical_json_bytes(obj: object) -> bytes:
    """Encode JSON deterministically.

    - UTF-8, stable key ordering, no insignificant whitespace
    - NaN/Infinity are rejected (ValueError); reports only carry finite numbers
    """

    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def stable_float(value: float, decimals: int) -> float:
    """Round for serialization; folds -0.0 into 0.0 so bytes do not flip."""

    rounded = round(float(value), decimals)
    return rounded + 0.0


def sha256_file(path: Path, chunk_size: int = 1024 * 1024) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            h.update(chunk)
    return h.hexdigest()


def write_json(path: Path, obj: object) -> str:
    """Write canonical JSON plus trailing newline; returns the sha256 of the bytes."""

    data = canonical_json_bytes(obj) + b"\n"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return hashlib.sha256(data).hexdigest()

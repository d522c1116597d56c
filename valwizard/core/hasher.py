"""Canonical hashing and atomic file helpers.

Canonical JSON is the signing and hashing input everywhere in the wizard:
transaction signing bytes, block preimages and stage output hashes all go
through ``canonical_json_bytes``.
"""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
from pathlib import Path
from typing import Any


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes — deterministic, sorted, compact.

    - sorted keys
    - no whitespace separators (",", ":")
    - ensure_ascii=True
    - UTF-8 encoding
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def compute_output_hash(stage_id: str, outputs: dict[str, Any]) -> str:
    """SHA-256 of canonical(stage_id + sorted outputs)."""
    payload = {"stage_id": stage_id, "outputs": outputs}
    return sha256_hex(canonical_json_bytes(payload))


def atomic_write_bytes(path: Path, data: bytes, *, mode: int | None = None) -> Path:
    """Write *data* to *path* so readers see either nothing or the full file.

    The bytes land in a temporary file in the target directory which is then
    renamed over *path*.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        if mode is not None:
            os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path


def atomic_write_json(path: Path, obj: Any, *, mode: int | None = None) -> Path:
    """Pretty-print *obj* as JSON and write it atomically."""
    data = json.dumps(obj, indent=2, sort_keys=True).encode("utf-8") + b"\n"
    return atomic_write_bytes(path, data, mode=mode)

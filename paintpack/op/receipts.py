# paintpack/op/receipts.py
# WO-00: Receipt dataclasses and environment fingerprinting

from __future__ import annotations
import json
import platform
import sys
from dataclasses import asdict, dataclass, field
from importlib import metadata
from typing import Any

from .hash import hash_bytes


@dataclass
class EnvRc:
    """
    Environment fingerprint.

    Two receipts with different env are compared with a warning, not a
    failure (NONDETERMINISTIC_ENV vs NONDETERMINISTIC_EXECUTION).
    """
    platform: str
    endian: str
    py_version: str
    numpy_version: str
    blake3_version: str
    build_flags_hash: str


def _dist_version(name: str) -> str:
    try:
        return metadata.version(name)
    except metadata.PackageNotFoundError:
        return "unknown"


def env_fingerprint() -> EnvRc:
    build_info = {
        "py_version": sys.version,
        "implementation": platform.python_implementation(),
        "version_info": list(sys.version_info),
    }
    flags = hash_bytes(json.dumps(build_info, sort_keys=True).encode())

    return EnvRc(
        platform=platform.platform(),
        endian=sys.byteorder,
        py_version=platform.python_version(),
        numpy_version=_dist_version("numpy"),
        blake3_version=_dist_version("blake3"),
        build_flags_hash=flags,
    )


@dataclass
class RectanglesRc:
    """
    Rectangle extraction receipt.

    demoted: rectangles rejected by the wire check whose cells went
    back to the residual set, as [x, y, width, height, color, reason].
    """
    count: int
    cells: int
    payload_bytes: int
    areas_hash: str
    demoted: list[list[Any]] = field(default_factory=list)


@dataclass
class RunsRc:
    count: int
    cells: int
    split_count: int      # runs opened because the length cap was hit
    max_length: int


@dataclass
class BatchRc:
    """Per-batch receipt: sizes and payload hash."""
    batch_id: int
    runs: int
    cells: int
    palette_size: int
    data_bytes: int
    palette_bytes: int
    payload_hash: str


@dataclass
class EncodeRc:
    """
    Root receipt for one encoding pass.

    table_hash = BLAKE3 over the ordered payload hashes, so two passes
    agree iff they would submit byte-identical payloads in the same order.
    """
    env: EnvRc
    grid: list[int]                 # [width, height]
    input_cells: int
    input_hash: str                 # hash of dense grid view
    rectangles: RectanglesRc | None
    runs: RunsRc | None
    batches: list[BatchRc]
    payload_hashes: list[str]
    table_hash: str
    total_bytes: int
    coverage_ok: bool
    failures: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class SubmitRc:
    """
    In-order submission receipt.

    committed payloads are NOT rolled back when a later one fails.
    """
    total: int
    committed: int
    failed_at: int | None = None
    error: str | None = None
    results: list[Any] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed_at is None


def aggregate(run: Any) -> dict:
    """
    Convert nested receipts (dataclasses or dicts) to a JSON-serializable dict.
    """
    def to_plain(x: Any) -> Any:
        if hasattr(x, "__dataclass_fields__"):
            return {k: to_plain(v) for k, v in asdict(x).items()}
        if isinstance(x, dict):
            return {k: to_plain(v) for k, v in x.items()}
        if isinstance(x, (list, tuple)):
            return [to_plain(v) for v in x]
        return x

    return to_plain(run)

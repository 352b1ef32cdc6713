# paintpack/io/save.py
# WO-00: Minimal JSON writers for plans and receipts

from __future__ import annotations
import json
import os
from typing import Any


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def write_json(path: str, obj: Any) -> None:
    """
    Write object as compact JSON (no whitespace, for determinism).

    Creates parent directories if needed.
    """
    _ensure_parent(path)
    with open(path, "w") as f:
        json.dump(obj, f, separators=(",", ":"))


def write_jsonl(path: str, records: list[Any], append: bool = False) -> None:
    """
    Write records as JSONL (one JSON object per line).
    """
    _ensure_parent(path)
    with open(path, "a" if append else "w") as f:
        for record in records:
            f.write(json.dumps(record, separators=(",", ":")) + "\n")

#!/usr/bin/env python3
# scripts/check_receipts.py
# WO-08: Receipt comparison tool
# Diffs two encode-receipt JSONL files for determinism verification

from __future__ import annotations
import json
import sys

# Environment fields differ across machines without affecting payloads
ENV_KEYS = {"env"}


def load_jsonl(path: str) -> list[dict]:
    with open(path) as f:
        return [json.loads(line) for line in f if line.strip()]


def deep_diff(a, b, path: str = "") -> list[str]:
    """
    Recursively list differences between two JSON values.

    Args:
        a, b: values to compare
        path: dotted path for messages

    Returns:
        list of difference descriptions
    """
    if isinstance(a, dict) and isinstance(b, dict):
        diffs = []
        for key in sorted(a.keys() | b.keys()):
            sub = f"{path}.{key}" if path else key
            if key not in a:
                diffs.append(f"{sub}: only in B")
            elif key not in b:
                diffs.append(f"{sub}: only in A")
            else:
                diffs.extend(deep_diff(a[key], b[key], sub))
        return diffs

    if isinstance(a, list) and isinstance(b, list) and len(a) == len(b):
        diffs = []
        for i, (x, y) in enumerate(zip(a, b)):
            diffs.extend(deep_diff(x, y, f"{path}[{i}]"))
        return diffs

    return [] if a == b else [f"{path}: {a!r} != {b!r}"]


def compare(records_a: list[dict], records_b: list[dict]) -> tuple[list[str], list[str]]:
    """
    Returns:
        (execution_diffs, env_diffs)
    """
    if len(records_a) != len(records_b):
        return [f"record count: {len(records_a)} != {len(records_b)}"], []

    exec_diffs, env_diffs = [], []
    for i, (ra, rb) in enumerate(zip(records_a, records_b)):
        for key in sorted(ra.keys() | rb.keys()):
            bucket = env_diffs if key in ENV_KEYS else exec_diffs
            bucket.extend(deep_diff(ra.get(key), rb.get(key), f"[{i}].{key}"))
    return exec_diffs, env_diffs


def main():
    if len(sys.argv) != 3:
        print("Usage: check_receipts.py <receipts_a.jsonl> <receipts_b.jsonl>", file=sys.stderr)
        sys.exit(2)

    exec_diffs, env_diffs = compare(load_jsonl(sys.argv[1]), load_jsonl(sys.argv[2]))

    for d in env_diffs:
        print(f"⚠ NONDETERMINISTIC_ENV {d}")
    for d in exec_diffs:
        print(f"✗ NONDETERMINISTIC_EXECUTION {d}")

    if exec_diffs:
        sys.exit(1)
    print("✓ Receipts match")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
# scripts/encode_pixels.py
# WO-08: Encode a pixel-update file into ordered submission payloads

"""
Contract (WO-08):
Load updates → encode_updates() → write plan JSON + receipt JSONL.

Run twice with --determinism to check that both passes produce the same
table_hash (NONDETERMINISTIC_EXECUTION otherwise).

Exit codes: 0 ok, 1 encode failure or nondeterminism, 2 bad input.
"""

from __future__ import annotations
import argparse
import sys
from pathlib import Path

# Add project root to path
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from paintpack.io.load_data import load_updates
from paintpack.io.save import write_json, write_jsonl
from paintpack.op.errors import EncodeError
from paintpack.op.grid import CANVAS_HEIGHT, CANVAS_WIDTH, GridSpec
from paintpack.op.receipts import aggregate
from paintpack.runner import encode_updates


def plan_to_doc(plan) -> dict:
    return {
        "payloads": [
            {"entry": p.entry, "args": list(p.args), "cells": p.cells, "hash": p.hash}
            for p in plan.payloads
        ],
        "table_hash": plan.receipt.table_hash,
    }


def main():
    """
    Encode one update file.

    Usage:
        python scripts/encode_pixels.py updates.json --out out/plan.json
    """
    parser = argparse.ArgumentParser(description="WO-08: Encode pixel updates into payloads")
    parser.add_argument("input", type=str, help="Pixel-update JSON file")
    parser.add_argument("--width", type=int, help="Grid width (overrides file)")
    parser.add_argument("--height", type=int, help="Grid height (overrides file)")
    parser.add_argument("--out", type=str, default="out/plan.json", help="Plan JSON path")
    parser.add_argument("--receipts", type=str, default="out/receipts/WO-08_encode.jsonl",
                        help="Receipt JSONL path")
    parser.add_argument("--determinism", action="store_true", help="Encode twice and compare hashes")

    args = parser.parse_args()

    grid = None
    if args.width or args.height:
        grid = GridSpec(args.width or CANVAS_WIDTH, args.height or CANVAS_HEIGHT)

    try:
        pixels = load_updates(args.input, grid)
    except (OSError, ValueError, KeyError) as e:
        # EncodeError is a ValueError
        kind = "EncodeError" if isinstance(e, EncodeError) else type(e).__name__
        print(f"ERROR: cannot load {args.input}: {kind}: {e}", file=sys.stderr)
        sys.exit(2)

    print(f"Loaded {len(pixels)} updates on {pixels.grid.width}x{pixels.grid.height} grid")

    ok, plan = encode_updates(pixels)
    rc = plan.receipt

    print(f"  rectangles: {len(plan.rectangles)}")
    print(f"  runs:       {len(plan.runs)}")
    print(f"  batches:    {len(plan.batches)}")
    print(f"  payloads:   {len(plan.payloads)} ({rc.total_bytes} bytes)")
    if rc.rectangles and rc.rectangles.demoted:
        print(f"  demoted:    {len(rc.rectangles.demoted)} rectangles re-encoded as runs")

    records = [aggregate(rc)]

    if args.determinism:
        ok2, plan2 = encode_updates(pixels)
        records.append(aggregate(plan2.receipt))
        if ok2 != ok or plan2.receipt.table_hash != rc.table_hash:
            print("✗ NONDETERMINISTIC_EXECUTION: table_hash differs between passes", file=sys.stderr)
            write_jsonl(args.receipts, records)
            sys.exit(1)
        print("  ✓ determinism: table_hash stable across 2 passes")

    write_json(args.out, plan_to_doc(plan))
    write_jsonl(args.receipts, records)
    print(f"Wrote plan to {args.out}, receipts to {args.receipts}")

    if not ok:
        for failure in rc.failures:
            print(f"✗ {failure}", file=sys.stderr)
        sys.exit(1)

    print(f"✓ {plan.cells} cells in {len(plan.payloads)} payloads, table_hash={rc.table_hash[:16]}…")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
# paintpack/runner.py
# WO-06: Encoding pipeline + in-order submission driver

"""
Contract (WO-06):
payloads = Wire ∘ Batches ∘ Runs ∘ Residual(Rectangles(P))

Frozen order (no reordering):
Rectangles(02) → wire check → Runs(03) → Batches(04) → Wire(05) → coverage

Output is an ordered plan: the rectangle payload (if any) first, then
one (data, palette) payload per batch. The caller submits strictly in
order, waiting for each to confirm before sending the next.

Fail-closed: operators raise EncodeError; the pipeline records the
failure in the receipt and returns ok=False instead of aborting.
A rectangle that fails the wire check is demoted: its cells go back
to the residual set and are encoded as runs.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
import numpy as np

from paintpack.op.bytes import to_hex
from paintpack.op.errors import EncodeError
from paintpack.op.grid import ABSENT, GridSpec, PixelUpdateSet
from paintpack.op.hash import hash_bytes, hash_grid, hash_payload
from paintpack.op.palette import MAX_PALETTE, Batch, split_batches
from paintpack.op.receipts import (
    BatchRc,
    EncodeRc,
    RectanglesRc,
    RunsRc,
    SubmitRc,
    env_fingerprint,
)
from paintpack.op.rectangles import Rectangle, find_rectangles, rectangle_cells
from paintpack.op.runs import MAX_RUN_LENGTH, Run, find_runs
from paintpack.op.wire import (
    ENTRY_AREAS,
    ENTRY_RLE_PALETTE,
    check_rectangle,
    encode_areas,
    encode_batch,
)


@dataclass(frozen=True)
class Payload:
    """One remote call: entry point + hex arguments."""
    entry: str
    args: Tuple[str, ...]
    cells: int
    hash: str


@dataclass
class EncodePlan:
    rectangles: List[Rectangle]
    runs: List[Run]
    batches: List[Batch]
    payloads: List[Payload]
    receipt: EncodeRc

    @property
    def cells(self) -> int:
        return sum(p.cells for p in self.payloads)


def coverage_check(
    pixels: PixelUpdateSet,
    rectangles: Sequence[Rectangle],
    runs: Sequence[Run],
    grid: GridSpec,
) -> Tuple[bool, Dict[str, int]]:
    """
    Verify rectangles ⊎ runs == input cells, colors included.

    Returns:
        (ok, detail) with counts of double-covered, missing, extra and
        color-mismatched cells; ok iff all four are zero.
    """
    counts = np.zeros(grid.size, dtype=np.int32)
    painted = np.full(grid.size, ABSENT, dtype=np.int64)
    out_of_grid = 0

    counts2d = counts.reshape(grid.height, grid.width)
    painted2d = painted.reshape(grid.height, grid.width)
    for r in rectangles:
        if r.x + r.width > grid.width or r.y + r.height > grid.height:
            out_of_grid += r.area
            continue
        counts2d[r.y:r.y + r.height, r.x:r.x + r.width] += 1
        painted2d[r.y:r.y + r.height, r.x:r.x + r.width] = r.color.value

    for run in runs:
        if run.end > grid.size:
            out_of_grid += run.length
            continue
        counts[run.start:run.end] += 1
        painted[run.start:run.end] = run.color.value

    want = np.full(grid.size, ABSENT, dtype=np.int64)
    for index, color in pixels.entries():
        if grid.contains(index):
            want[index] = color.value
    present = want != ABSENT
    covered = counts > 0

    detail = {
        "double_covered": int(np.sum(counts > 1)),
        "missing": int(np.sum(present & ~covered)),
        "extra": int(np.sum(covered & ~present)) + out_of_grid,
        "color_mismatch": int(np.sum(present & covered & (painted != want))),
    }
    return not any(detail.values()), detail


def _demote_oversized(
    rectangles: List[Rectangle],
    pixels: PixelUpdateSet,
    residual: PixelUpdateSet,
    grid: GridSpec,
) -> Tuple[List[Rectangle], List[List[Any]]]:
    kept, demoted = [], []
    for r in rectangles:
        try:
            check_rectangle(r)
        except EncodeError as e:
            demoted.append([r.x, r.y, r.width, r.height, r.color.value, str(e)])
            for index in rectangle_cells(r, grid):
                residual.set(index, pixels.get(index))
            continue
        kept.append(r)
    return kept, demoted


def _count_cap_splits(runs: Sequence[Run]) -> int:
    n = 0
    for prev, run in zip(runs, runs[1:]):
        if prev.end == run.start and prev.color == run.color:
            n += 1
    return n


def encode_updates(
    pixels: PixelUpdateSet,
    grid: Optional[GridSpec] = None,
    *,
    max_run_length: int = MAX_RUN_LENGTH,
    capacity: int = MAX_PALETTE,
) -> Tuple[bool, EncodePlan]:
    """
    Run the full encoder on one snapshot of pending updates.

    Args:
        pixels: caller-owned update set (not modified)
        grid: geometry; defaults to pixels.grid
        max_run_length: run cap (255 for the wire format)
        capacity: distinct colors per batch (256 for the wire format)

    Returns:
        (ok, EncodePlan); ok=False if any payload failed to encode or
        the coverage check did not hold. Failed payloads are omitted
        from plan.payloads and listed in plan.receipt.failures.
    """
    grid = grid or pixels.grid
    failures: List[Dict[str, Any]] = []

    found, residual = find_rectangles(pixels, grid)
    rectangles, demoted = _demote_oversized(found, pixels, residual, grid)

    runs = find_runs(residual, max_run_length)
    batches = split_batches(runs, capacity)

    payloads: List[Payload] = []
    rect_rc = None
    if rectangles:
        area_hex = to_hex(encode_areas(rectangles))
        cells = sum(r.area for r in rectangles)
        payloads.append(Payload(ENTRY_AREAS, (area_hex,), cells, hash_payload(ENTRY_AREAS, area_hex)))
        rect_rc = RectanglesRc(
            count=len(rectangles),
            cells=cells,
            payload_bytes=(len(area_hex) - 2) // 2,
            areas_hash=payloads[0].hash,
            demoted=demoted,
        )
    elif demoted:
        rect_rc = RectanglesRc(count=0, cells=0, payload_bytes=0, areas_hash="", demoted=demoted)

    batch_rcs: List[BatchRc] = []
    for i, batch in enumerate(batches):
        try:
            data, palette = encode_batch(batch)
        except EncodeError as e:
            failures.append({"stage": "batch", "batch_id": i, "error": type(e).__name__, "message": str(e)})
            continue
        data_hex, palette_hex = to_hex(data), to_hex(palette)
        p = Payload(ENTRY_RLE_PALETTE, (data_hex, palette_hex), batch.cells,
                    hash_payload(ENTRY_RLE_PALETTE, data_hex, palette_hex))
        payloads.append(p)
        batch_rcs.append(BatchRc(
            batch_id=i,
            runs=len(batch.runs),
            cells=batch.cells,
            palette_size=len(batch.palette),
            data_bytes=len(data),
            palette_bytes=len(palette),
            payload_hash=p.hash,
        ))

    runs_rc = None
    if runs:
        runs_rc = RunsRc(
            count=len(runs),
            cells=sum(r.length for r in runs),
            split_count=_count_cap_splits(runs),
            max_length=max_run_length,
        )

    coverage_ok, coverage = coverage_check(pixels, rectangles, runs, grid)
    if not coverage_ok:
        failures.append({"stage": "coverage", **coverage})

    payload_hashes = [p.hash for p in payloads]
    receipt = EncodeRc(
        env=env_fingerprint(),
        grid=[grid.width, grid.height],
        input_cells=len(pixels),
        input_hash=hash_grid(pixels.to_grid()),
        rectangles=rect_rc,
        runs=runs_rc,
        batches=batch_rcs,
        payload_hashes=payload_hashes,
        table_hash=hash_bytes("".join(payload_hashes).encode()),
        total_bytes=sum((len(a) - 2) // 2 for p in payloads for a in p.args),
        coverage_ok=coverage_ok,
        failures=failures,
    )

    plan = EncodePlan(rectangles, runs, batches, payloads, receipt)
    return not failures, plan


def submit_plan(
    plan: EncodePlan,
    submit: Callable[[Payload], Any],
    progress: Optional[Callable[[int, int, Payload], None]] = None,
) -> SubmitRc:
    """
    Submit payloads strictly in order, one at a time.

    `submit` must block until the remote side confirms and return a
    receipt (e.g. a transaction hash). Raising, or returning None, marks
    that payload as failed; nothing after it is sent and nothing before
    it is rolled back.

    Args:
        plan: output of encode_updates
        submit: caller's submission function
        progress: optional callback(i, total, payload) before each send
    """
    total = len(plan.payloads)
    rc = SubmitRc(total=total, committed=0)

    for i, payload in enumerate(plan.payloads):
        if progress is not None:
            progress(i, total, payload)
        try:
            result = submit(payload)
        except Exception as e:  # transport errors end the sequence
            rc.failed_at, rc.error = i, f"{type(e).__name__}: {e}"
            return rc
        if result is None:
            rc.failed_at, rc.error = i, f"{payload.entry} returned no receipt"
            return rc
        rc.results.append(result)
        rc.committed += 1

    return rc

# paintpack/op/runs.py
# WO-03: Run-length encoding of residual cells by ascending index

"""
Contract (WO-03):
- Sort residual cells by index.
- Extend the open run iff next index == start + length AND same color.
- A run closes when it reaches max_length (255 on the wire); the next
  cell opens a new run. Long fills are split, never truncated.
- Forward-maximal only: no merging across gaps or reordering by color.
- Empty input -> []; one cell -> one run of length 1.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import List, Sequence

from .color import Color
from .grid import PixelUpdateSet

MAX_RUN_LENGTH = 255


@dataclass(frozen=True)
class Run:
    """Cells start .. start+length-1, all one color."""
    start: int
    length: int
    color: Color

    @property
    def end(self) -> int:
        """One past the last covered index."""
        return self.start + self.length


def find_runs(pixels: PixelUpdateSet, max_length: int = MAX_RUN_LENGTH) -> List[Run]:
    """
    Encode cells as forward-maximal same-color runs, capped at max_length.

    Args:
        pixels: residual cells (after rectangle extraction)
        max_length: longest run emitted (>= 1)

    Returns:
        runs in ascending start order
    """
    if max_length < 1:
        raise ValueError(f"max_length must be >= 1, got {max_length}")

    cells = sorted(pixels.entries(), key=lambda kv: kv[0])
    if not cells:
        return []

    runs: List[Run] = []
    start, color = cells[0]
    length = 1

    for index, c in cells[1:]:
        if c == color and index == start + length and length < max_length:
            length += 1
            continue
        runs.append(Run(start, length, color))
        start, color, length = index, c, 1

    runs.append(Run(start, length, color))
    return runs


def split_long_runs(runs: Sequence[Run], max_length: int = MAX_RUN_LENGTH) -> List[Run]:
    """
    Post-pass: split any run longer than max_length into consecutive pieces.

    Order and coverage are preserved; runs already within bounds pass through.
    """
    if max_length < 1:
        raise ValueError(f"max_length must be >= 1, got {max_length}")

    out: List[Run] = []
    for run in runs:
        if run.length <= max_length:
            out.append(run)
            continue
        offset = 0
        while offset < run.length:
            chunk = min(max_length, run.length - offset)
            out.append(replace(run, start=run.start + offset, length=chunk))
            offset += chunk
    return out

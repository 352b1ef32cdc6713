#!/usr/bin/env python3
# paintpack/op/rectangles.py
# WO-02: Maximal same-color rectangle extraction

"""
Contract (WO-02):
Greedy scan in (y, x) order over a dense view of the update set.

Frozen algorithm:
1. Visit pixels ascending by (y, x); skip claimed cells
2. Grow width right while the cell exists, is unclaimed, same color
3. Grow height down while the WHOLE next row segment [x, x+width)
   exists, is unclaimed, same color
4. Emit only if width*height > 1 (single cells go to the run encoder)
5. Claim emitted cells; residual = unclaimed pixels
6. Order output by area descending, stable on discovery order

Bounds: width stops at grid.width, height at grid.height. No byte-size
limit is applied here; the wire formatter rejects fields > 255.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple
import numpy as np

from .color import Color
from .grid import ABSENT, GridSpec, PixelUpdateSet


@dataclass(frozen=True)
class Rectangle:
    """Solid block [x, x+width) × [y, y+height) of one color."""
    x: int
    y: int
    width: int
    height: int
    color: Color

    @property
    def area(self) -> int:
        return self.width * self.height

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height


def _grow_width(G: np.ndarray, claimed: np.ndarray, x: int, y: int, color: int) -> int:
    W = G.shape[1]
    width = 1
    while x + width < W and not claimed[y, x + width] and G[y, x + width] == color:
        width += 1
    return width


def _grow_height(G: np.ndarray, claimed: np.ndarray, x: int, y: int, width: int, color: int) -> int:
    H = G.shape[0]
    height = 1
    while y + height < H:
        row = y + height
        # Whole segment must match; one miss stops growth
        if not np.all(G[row, x:x + width] == color) or np.any(claimed[row, x:x + width]):
            break
        height += 1
    return height


def find_rectangles(
    pixels: PixelUpdateSet,
    grid: GridSpec | None = None
) -> Tuple[List[Rectangle], PixelUpdateSet]:
    """
    Extract maximal same-color rectangles.

    Args:
        pixels: pending updates (read-only)
        grid: grid geometry; defaults to pixels.grid

    Returns:
        (rectangles, residual)
        - rectangles: area-descending, ties in discovery order
        - residual: new PixelUpdateSet of the cells no rectangle claimed
    """
    grid = grid or pixels.grid
    residual = PixelUpdateSet(grid)
    if len(pixels) == 0:
        return [], residual

    G = pixels.to_grid() if grid == pixels.grid else _dense(pixels, grid)
    claimed = np.zeros(G.shape, dtype=bool)

    # (y, x) ascending == index ascending on a row-major grid
    order = sorted(pixels)

    found: List[Rectangle] = []
    for index in order:
        y, x = divmod(index, grid.width)
        if claimed[y, x]:
            continue

        color = int(G[y, x])
        width = _grow_width(G, claimed, x, y, color)
        height = _grow_height(G, claimed, x, y, width, color)

        if width * height > 1:
            found.append(Rectangle(x, y, width, height, Color(color)))
            claimed[y:y + height, x:x + width] = True

    for index, color in pixels.entries():
        y, x = divmod(index, grid.width)
        if not claimed[y, x]:
            residual.set(index, color)

    # sorted() is stable: equal areas keep discovery order
    rectangles = sorted(found, key=lambda r: -r.area)
    return rectangles, residual


def _dense(pixels: PixelUpdateSet, grid: GridSpec) -> np.ndarray:
    G = np.full((grid.height, grid.width), ABSENT, dtype=np.int64)
    for index, color in pixels.entries():
        y, x = grid.coords(index)[::-1]
        G[y, x] = color.value
    return G


def rectangle_cells(rect: Rectangle, grid: GridSpec) -> Iterator[int]:
    """Cell indices covered by rect, row-major."""
    for dy in range(rect.height):
        base = (rect.y + dy) * grid.width + rect.x
        for dx in range(rect.width):
            yield base + dx


def is_index_in_rectangles(index: int, rectangles: Sequence[Rectangle], grid: GridSpec) -> bool:
    """True if any rectangle covers the cell at index."""
    x, y = grid.coords(index)
    return any(r.contains(x, y) for r in rectangles)

# paintpack/op/grid.py
# WO-01: Grid geometry and the sparse pixel-update set

"""
Contract (WO-01):
- Cell index i in [0, W*H); x = i % W, y = i // W.
- Canvas defaults to 64×64; width/height are explicit GridSpec values,
  never literals inside operators.
- PixelUpdateSet maps index -> latest Color. Re-adding an index
  overwrites; no index appears twice.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Tuple, Union
import numpy as np

from .color import Color, as_color
from .errors import IndexOutOfRange

CANVAS_WIDTH = 64
CANVAS_HEIGHT = 64
ABSENT = -1  # dense-grid marker for cells with no pending update


@dataclass(frozen=True)
class GridSpec:
    """Grid dimensions, agreed with the remote side out of band."""
    width: int = CANVAS_WIDTH
    height: int = CANVAS_HEIGHT

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Grid must be at least 1x1, got {self.width}x{self.height}")

    @property
    def size(self) -> int:
        return self.width * self.height

    def contains(self, index: int) -> bool:
        return 0 <= index < self.size

    def check_index(self, index: int) -> int:
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
            raise IndexOutOfRange(f"Cell index must be an integer, got {type(index).__name__}")
        if not self.contains(int(index)):
            raise IndexOutOfRange(f"Cell index {index} outside [0, {self.size})")
        return int(index)

    def coords(self, index: int) -> Tuple[int, int]:
        """index -> (x, y)"""
        index = self.check_index(index)
        return index % self.width, index // self.width

    def index(self, x: int, y: int) -> int:
        """(x, y) -> index"""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexOutOfRange(f"Cell ({x},{y}) outside {self.width}x{self.height} grid")
        return y * self.width + x


DEFAULT_GRID = GridSpec()


class PixelUpdateSet:
    """
    Sparse map of pending cell changes: index -> Color.

    Owned by the caller; encoder operators only read it.
    entries() order is insertion order but consumers must not rely on it.
    """

    def __init__(self, grid: GridSpec = DEFAULT_GRID):
        self.grid = grid
        self._cells: Dict[int, Color] = {}

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[Tuple[int, Union[int, str, Color]]],
        grid: GridSpec = DEFAULT_GRID,
    ) -> "PixelUpdateSet":
        ps = cls(grid)
        for index, color in pairs:
            ps.set(index, color)
        return ps

    def set(self, index: int, color: Union[int, str, Color]) -> None:
        self._cells[self.grid.check_index(index)] = as_color(color)

    def remove(self, index: int) -> bool:
        """Delete index; returns False if it was not present."""
        return self._cells.pop(index, None) is not None

    def get(self, index: int) -> Optional[Color]:
        return self._cells.get(index)

    def entries(self) -> Iterator[Tuple[int, Color]]:
        return iter(list(self._cells.items()))

    def indices(self) -> set[int]:
        return set(self._cells)

    def copy(self) -> "PixelUpdateSet":
        ps = PixelUpdateSet(self.grid)
        ps._cells = dict(self._cells)
        return ps

    def to_grid(self) -> np.ndarray:
        """
        Dense (H, W) int64 view: color value per cell, ABSENT where no update.
        """
        G = np.full((self.grid.height, self.grid.width), ABSENT, dtype=np.int64)
        for index, color in self._cells.items():
            y, x = divmod(index, self.grid.width)
            G[y, x] = color.value
        return G

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, index: object) -> bool:
        return index in self._cells

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._cells))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelUpdateSet):
            return NotImplemented
        return self.grid == other.grid and self._cells == other._cells

    def __repr__(self) -> str:
        return f"PixelUpdateSet({self.grid.width}x{self.grid.height}, {len(self)} cells)"

# paintpack/op/palette.py
# WO-04: Per-batch palettes and capacity-bounded batch splitting

"""
Contract (WO-04):
Walk runs in input order with an insertion-ordered color set:
- color already in batch      -> append run (no capacity used)
- new color, palette not full -> add color, append run
- new color, palette full     -> close batch; new batch = [run], {color}
Flush the last non-empty batch.

Palette order = first-added order within the batch, so a color's
position is its one-byte index on the wire.
Only distinct colors are bounded; a batch may hold any number of runs.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from .color import Color
from .errors import PaletteOverflow
from .runs import Run

MAX_PALETTE = 256


@dataclass(frozen=True)
class Palette:
    """Ordered, deduplicated colors; position = color index."""
    colors: Tuple[Color, ...] = ()
    _lookup: Dict[Color, int] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        lookup: Dict[Color, int] = {}
        for i, c in enumerate(self.colors):
            if c in lookup:
                raise ValueError(f"Duplicate palette color {c!r}")
            lookup[c] = i
        object.__setattr__(self, "_lookup", lookup)

    @classmethod
    def from_colors(cls, colors: Iterable[Color]) -> "Palette":
        """First-seen order, duplicates dropped."""
        return cls(tuple(dict.fromkeys(colors)))

    def index_of(self, color: Color) -> int:
        """
        Raises:
            PaletteOverflow: color not in this palette
        """
        try:
            return self._lookup[color]
        except KeyError:
            raise PaletteOverflow(f"Color {color!r} not in batch palette") from None

    def __len__(self) -> int:
        return len(self.colors)

    def __getitem__(self, i: int) -> Color:
        return self.colors[i]

    def __contains__(self, color: object) -> bool:
        return color in self._lookup


@dataclass(frozen=True)
class Batch:
    """One submittable RLE unit: runs + the palette they index into."""
    runs: Tuple[Run, ...]
    palette: Palette

    @property
    def cells(self) -> int:
        return sum(r.length for r in self.runs)


def split_batches(runs: Sequence[Run], capacity: int = MAX_PALETTE) -> List[Batch]:
    """
    Split runs into batches of at most `capacity` distinct colors.

    Args:
        runs: runs in submission order
        capacity: max distinct colors per batch (256 fits a one-byte index)

    Returns:
        batches in order; concatenating their runs reproduces `runs`
    """
    if capacity < 1:
        raise ValueError(f"capacity must be >= 1, got {capacity}")

    batches: List[Batch] = []
    colors: Dict[Color, None] = {}  # insertion-ordered set
    current: List[Run] = []

    for run in runs:
        if run.color in colors:
            current.append(run)
        elif len(colors) < capacity:
            colors[run.color] = None
            current.append(run)
        else:
            batches.append(Batch(tuple(current), Palette(tuple(colors))))
            current = [run]
            colors = {run.color: None}

    if current:
        batches.append(Batch(tuple(current), Palette(tuple(colors))))

    return batches

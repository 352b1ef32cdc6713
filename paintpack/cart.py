# paintpack/cart.py
# WO-07: Caller-owned staging state ("paint cart") with original-value snapshots

"""
Contract (WO-07):
- The cart is an explicit value owned by the caller; the encoder only
  ever sees the PixelUpdateSet it produces.
- Staging a cell the first time snapshots its current canvas color;
  recoloring a staged cell keeps the first snapshot.
- Erasing or clearing hands back the snapshot so the caller can
  restore its preview. Cells absent from the canvas restore to 0.
- Checkout failure empties the cart and returns every snapshot; the
  remote side may already hold the committed prefix.
"""

from __future__ import annotations
from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple, Union, Any

from paintpack.op.color import Color, as_color
from paintpack.op.grid import DEFAULT_GRID, GridSpec, PixelUpdateSet
from paintpack.op.receipts import SubmitRc
from paintpack.runner import Payload, encode_updates, submit_plan

ColorLike = Union[int, str, Color]
BLANK = Color(0)


class PaintCart:
    """Pending edits plus the canvas colors they replace."""

    def __init__(self, grid: GridSpec = DEFAULT_GRID, canvas: Optional[Mapping[int, ColorLike]] = None):
        self.grid = grid
        self._canvas: Dict[int, Color] = {int(i): as_color(c) for i, c in (canvas or {}).items()}
        self._staged: Dict[int, Color] = {}
        self._originals: Dict[int, Color] = {}

    def stage(self, index: int, color: ColorLike) -> bool:
        """
        Stage a color for a cell.

        Returns:
            True if the cart changed (new cell or new color for a staged cell)
        """
        index = self.grid.check_index(index)
        color = as_color(color)

        if index in self._staged:
            if self._staged[index] == color:
                return False
            self._staged[index] = color
            return True

        self._originals.setdefault(index, self._canvas.get(index, BLANK))
        self._staged[index] = color
        return True

    def stage_many(self, pairs: Iterable[Tuple[int, ColorLike]]) -> int:
        """Stage several cells (e.g. a rasterized image); returns cells changed."""
        return sum(1 for index, color in pairs if self.stage(index, color))

    def erase(self, index: int) -> Optional[Color]:
        """
        Unstage a cell.

        Returns:
            color to restore in the caller's preview, or None if not staged
        """
        if index not in self._staged:
            return None
        del self._staged[index]
        return self._originals.pop(index, self._canvas.get(index, BLANK))

    def clear(self) -> Dict[int, Color]:
        """Unstage everything; returns index -> color to restore."""
        restore = self.restore_map()
        self._staged.clear()
        self._originals.clear()
        return restore

    def restore_map(self) -> Dict[int, Color]:
        return {i: self._originals.get(i, self._canvas.get(i, BLANK)) for i in self._staged}

    def updates(self) -> PixelUpdateSet:
        """Snapshot of staged edits for the encoder."""
        return PixelUpdateSet.from_pairs(self._staged.items(), self.grid)

    def tokens_needed(self) -> int:
        """One paint token per staged cell."""
        return len(self._staged)

    def tokens_to_buy(self, balance: int) -> int:
        return max(0, self.tokens_needed() - balance)

    def checkout(
        self,
        submit: Callable[[Payload], Any],
        progress: Optional[Callable[[int, int, Payload], None]] = None,
    ) -> Tuple[bool, SubmitRc, Dict[int, Color]]:
        """
        Encode staged edits and submit them in order.

        Returns:
            (ok, submit_rc, restore)
            - success: canvas snapshot updated, cart emptied, restore == {}
            - encode or submit failure: cart emptied, restore holds every
              snapshot; submit_rc.committed payloads stay applied remotely
        """
        ok, plan = encode_updates(self.updates(), self.grid)
        if not ok:
            rc = SubmitRc(total=len(plan.payloads), committed=0, failed_at=0,
                          error=f"encode failed: {plan.receipt.failures}")
            return False, rc, self.clear()

        rc = submit_plan(plan, submit, progress)
        if not rc.ok:
            return False, rc, self.clear()

        self._canvas.update(self._staged)
        self._staged.clear()
        self._originals.clear()
        return True, rc, {}

    def __len__(self) -> int:
        return len(self._staged)

    def __contains__(self, index: object) -> bool:
        return index in self._staged

    def get(self, index: int) -> Optional[Color]:
        return self._staged.get(index)

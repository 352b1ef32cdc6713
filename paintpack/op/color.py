# paintpack/op/color.py
# WO-01: Validated 24-bit color value type

"""
Contract (WO-01):
Colors are packed RGB integers, red in the high byte, range 0..0xFFFFFF.
Out-of-range values are rejected at construction, never masked.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union
import numpy as np

from .errors import InvalidColor

MAX_COLOR = 0xFFFFFF


@dataclass(frozen=True, order=True)
class Color:
    """24-bit packed RGB color."""
    value: int

    def __post_init__(self) -> None:
        v = self.value
        if isinstance(v, bool) or not isinstance(v, (int, np.integer)):
            raise InvalidColor(f"Color must be an integer, got {type(v).__name__}")
        if not 0 <= int(v) <= MAX_COLOR:
            raise InvalidColor(f"Color {int(v):#x} outside 0..{MAX_COLOR:#x}")
        # normalize numpy scalars to plain int
        object.__setattr__(self, "value", int(v))

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"Color({self.hex()})"

    def rgb(self) -> tuple[int, int, int]:
        v = self.value
        return (v >> 16) & 0xFF, (v >> 8) & 0xFF, v & 0xFF

    def hex(self) -> str:
        """CSS form, e.g. '#3b82f6'."""
        return f"#{self.value:06x}"

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> "Color":
        for name, c in (("r", r), ("g", g), ("b", b)):
            if not 0 <= c <= 0xFF:
                raise InvalidColor(f"{name}={c} outside 0..255")
        return cls((r << 16) | (g << 8) | b)

    @classmethod
    def parse(cls, text: Union[str, int, "Color"]) -> "Color":
        """
        Parse '#RRGGBB', '0xRRGGBB', 'RRGGBB', an int, or a Color.

        Raises:
            InvalidColor: unparseable text or out-of-range value
        """
        if isinstance(text, Color):
            return text
        if not isinstance(text, str):
            return cls(text)

        s = text.strip().lower()
        if s.startswith("#"):
            s = s[1:]
        elif s.startswith("0x"):
            s = s[2:]

        if not s or len(s) > 6:
            raise InvalidColor(f"Cannot parse color {text!r}")
        try:
            return cls(int(s, 16))
        except ValueError as e:
            raise InvalidColor(f"Cannot parse color {text!r}") from e


def as_color(c: Union[int, str, Color]) -> Color:
    """Coerce caller input to Color (boundary validation)."""
    return Color.parse(c)

# paintpack/op/wire.py
# WO-05: Wire formats for rectangle and palette/RLE submissions

"""
Contract (WO-05):

Rectangle payload, 7 bytes per rectangle, no header (count = len/7):
    x(1) y(1) width(1) height(1) R(1) G(1) B(1)

RLE payload pair:
    data:    start(2, big-endian) length(1) color_index(1)   per run
    palette: R(1) G(1) B(1)                                  per entry

Both transported as "0x" + lowercase hex. Grid size is not carried.
Fields that do not fit are rejected, never masked.
"""

from __future__ import annotations
from typing import List, Sequence, Tuple

from .bytes import read_rgb24, read_u16_be, rgb24, u16_be, u8
from .color import Color
from .errors import (
    CoordinateOverflow,
    IndexOverflow,
    MalformedPayload,
    PaletteOverflow,
    RunLengthOverflow,
)
from .palette import MAX_PALETTE, Batch, Palette
from .rectangles import Rectangle
from .runs import Run

AREA_UNIT = 7
RUN_UNIT = 4
COLOR_UNIT = 3

# Remote entry points, in submission order
ENTRY_AREAS = "setPixelAreasCompact"
ENTRY_RLE_PALETTE = "setPixelColorsRLEPalette"


def check_rectangle(rect: Rectangle) -> None:
    """
    Raises:
        CoordinateOverflow: any of x, y, width, height outside 0..255
    """
    for name in ("x", "y", "width", "height"):
        u8(getattr(rect, name), name, CoordinateOverflow)


def encode_area(rect: Rectangle) -> bytes:
    check_rectangle(rect)
    return bytes((rect.x, rect.y, rect.width, rect.height)) + rgb24(rect.color.value)


def encode_areas(rectangles: Sequence[Rectangle]) -> bytes:
    """
    Concatenate 7-byte records in input order. Empty list -> b"".

    Raises:
        CoordinateOverflow: on the first rectangle that does not fit
    """
    return b"".join(encode_area(r) for r in rectangles)


def check_palette(palette: Palette) -> None:
    if len(palette) > MAX_PALETTE:
        raise PaletteOverflow(f"Palette has {len(palette)} colors, max {MAX_PALETTE}")


def encode_run(run: Run, palette: Palette) -> bytes:
    if not 1 <= run.length <= 0xFF:
        raise RunLengthOverflow(f"Run at {run.start} has length {run.length}, allowed 1..255")
    return (
        u16_be(run.start, "start", IndexOverflow)
        + u8(run.length, "length", RunLengthOverflow)
        + u8(palette.index_of(run.color), "color_index", PaletteOverflow)
    )


def encode_palette(palette: Palette) -> bytes:
    check_palette(palette)
    return b"".join(rgb24(c.value) for c in palette.colors)


def encode_batch(batch: Batch) -> Tuple[bytes, bytes]:
    """
    Serialize one batch.

    Returns:
        (data_bytes, palette_bytes)

    Raises:
        PaletteOverflow: palette too large or run color missing
        RunLengthOverflow: run length outside 1..255
        IndexOverflow: run start > 65535
    """
    palette_bytes = encode_palette(batch.palette)
    data_bytes = b"".join(encode_run(r, batch.palette) for r in batch.runs)
    return data_bytes, palette_bytes


def decode_areas(b: bytes) -> List[Rectangle]:
    """Inverse of encode_areas."""
    if len(b) % AREA_UNIT:
        raise MalformedPayload(f"Area payload length {len(b)} is not a multiple of {AREA_UNIT}")

    rects = []
    for off in range(0, len(b), AREA_UNIT):
        x, y, w, h = b[off:off + 4]
        rects.append(Rectangle(x, y, w, h, Color(read_rgb24(b, off + 4))))
    return rects


def decode_palette(b: bytes) -> Palette:
    if len(b) % COLOR_UNIT:
        raise MalformedPayload(f"Palette payload length {len(b)} is not a multiple of {COLOR_UNIT}")
    colors = tuple(Color(read_rgb24(b, off)) for off in range(0, len(b), COLOR_UNIT))
    if len(set(colors)) != len(colors):
        raise MalformedPayload("Palette payload repeats a color")
    return Palette(colors)


def decode_batch(data: bytes, palette: bytes) -> Batch:
    """
    Inverse of encode_batch: rebuild absolute colors via palette[color_index].
    """
    if len(data) % RUN_UNIT:
        raise MalformedPayload(f"Run payload length {len(data)} is not a multiple of {RUN_UNIT}")

    pal = decode_palette(palette)
    runs = []
    for off in range(0, len(data), RUN_UNIT):
        start = read_u16_be(data, off)
        length = data[off + 2]
        ci = data[off + 3]
        if ci >= len(pal):
            raise MalformedPayload(f"Color index {ci} out of range for palette of {len(pal)}")
        if length == 0:
            raise MalformedPayload(f"Zero-length run at {start}")
        runs.append(Run(start, length, pal[ci]))
    return Batch(tuple(runs), pal)

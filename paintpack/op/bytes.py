# paintpack/op/bytes.py
# WO-00: Fixed-width big-endian packing (u8, u16, rgb24) and hex transport

from __future__ import annotations
import numpy as np

from .errors import MalformedPayload

HEX_PREFIX = "0x"


def to_bytes_grid(G: np.ndarray) -> bytes:
    """
    Encode H×W color grid as int32 little-endian row-major bytes.

    Absent cells (-1) survive the cast, so two grids hash equal only
    when they agree on both colors and presence.

    Raises:
        TypeError: if G is not integer dtype
    """
    if G.dtype.kind not in "iu":
        raise TypeError("Grid must be integer dtype")

    g32 = G.astype(np.dtype("<i4"), copy=False)
    return g32.tobytes(order="C")


def u8(n: int, field: str, exc: type[Exception] = OverflowError) -> bytes:
    """
    Pack one unsigned byte.

    Args:
        n: value, must be 0..255
        field: field name for the error message
        exc: exception type raised on overflow

    Raises:
        exc: if n is outside 0..255
    """
    if not 0 <= n <= 0xFF:
        raise exc(f"{field}={n} does not fit in one byte (0..255)")
    return bytes((n,))


def u16_be(n: int, field: str, exc: type[Exception] = OverflowError) -> bytes:
    """Pack unsigned 16-bit big-endian; raises exc outside 0..65535."""
    if not 0 <= n <= 0xFFFF:
        raise exc(f"{field}={n} does not fit in two bytes (0..65535)")
    return bytes(((n >> 8) & 0xFF, n & 0xFF))


def rgb24(color: int) -> bytes:
    """
    Pack 24-bit color as R, G, B.

    Caller guarantees 0 <= color <= 0xFFFFFF (Color validates at construction).
    """
    return bytes(((color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF))


def read_u16_be(b: bytes, offset: int) -> int:
    return (b[offset] << 8) | b[offset + 1]


def read_rgb24(b: bytes, offset: int) -> int:
    return (b[offset] << 16) | (b[offset + 1] << 8) | b[offset + 2]


def to_hex(b: bytes) -> str:
    """
    Transport form: "0x" + lowercase hex, no separators.

    Empty payload encodes as "0x".
    """
    return HEX_PREFIX + bytes(b).hex()


def from_hex(s: str) -> bytes:
    """
    Inverse of to_hex.

    Raises:
        MalformedPayload: missing prefix, odd length, or non-hex digits
    """
    if not isinstance(s, str) or not s.startswith(HEX_PREFIX):
        raise MalformedPayload(f"Hex payload must start with {HEX_PREFIX!r}")

    body = s[len(HEX_PREFIX):]
    if len(body) % 2:
        raise MalformedPayload(f"Hex payload has odd length {len(body)}")

    try:
        return bytes.fromhex(body)
    except ValueError as e:
        raise MalformedPayload(f"Hex payload has non-hex digits: {e}") from e

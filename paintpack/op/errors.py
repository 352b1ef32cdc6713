# paintpack/op/errors.py
# WO-00: Encoder error taxonomy

"""
Every failure an operator can report is an EncodeError.

EncodeError subclasses ValueError so callers that only care about
"bad input" can catch the builtin. Operators raise; the pipeline in
paintpack/runner.py catches and records (fail-closed receipts).
"""

from __future__ import annotations


class EncodeError(ValueError):
    """Base class for all encoder failures."""


class InvalidColor(EncodeError):
    """Color outside 0..0xFFFFFF or not parseable."""


class IndexOutOfRange(EncodeError):
    """Cell index or coordinate outside the grid."""


class CoordinateOverflow(EncodeError):
    """Rectangle x/y/width/height does not fit in one byte."""


class RunLengthOverflow(EncodeError):
    """Run length outside 1..255."""


class IndexOverflow(EncodeError):
    """Run start index does not fit in two bytes."""


class PaletteOverflow(EncodeError):
    """Palette exceeds 256 entries or a run color is missing from it."""


class MalformedPayload(EncodeError):
    """Hex string or byte payload cannot be decoded."""

# paintpack/io/load_data.py
# WO-00: Pixel-update JSON loader

from __future__ import annotations
import json
from typing import Any

from paintpack.op.grid import CANVAS_HEIGHT, CANVAS_WIDTH, GridSpec, PixelUpdateSet


def load_updates(path: str, grid: GridSpec | None = None) -> PixelUpdateSet:
    """
    Load pending updates from a JSON file.

    Expected format (width/height optional, default 64×64):
    {
        "width": 64, "height": 64,
        "pixels": {"0": "#ff0000", "65": 16711680, ...}
    }
    "pixels" may also be a list of [index, color] pairs or of
    {"index": ..., "color": ...} objects. Colors are ints or hex strings.

    Args:
        path: JSON file
        grid: overrides the file's width/height

    Raises:
        ValueError: unknown "pixels" shape
        EncodeError: bad index or color
    """
    with open(path, "r") as f:
        doc = json.load(f)
    return updates_from_doc(doc, grid)


def updates_from_doc(doc: dict[str, Any], grid: GridSpec | None = None) -> PixelUpdateSet:
    if grid is None:
        grid = GridSpec(int(doc.get("width", CANVAS_WIDTH)), int(doc.get("height", CANVAS_HEIGHT)))

    raw = doc.get("pixels", {})
    if isinstance(raw, dict):
        pairs = [(int(k), v) for k, v in raw.items()]
    elif isinstance(raw, list):
        pairs = []
        for item in raw:
            if isinstance(item, dict):
                pairs.append((int(item["index"]), item["color"]))
            else:
                index, color = item
                pairs.append((int(index), color))
    else:
        raise ValueError(f"'pixels' must be an object or a list, got {type(raw).__name__}")

    return PixelUpdateSet.from_pairs(pairs, grid)

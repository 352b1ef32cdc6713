# paintpack/op/hash.py
# WO-00: BLAKE3 hashing helpers for payloads and receipts

from __future__ import annotations
from blake3 import blake3
import numpy as np
from .bytes import to_bytes_grid


def hash_bytes(b: bytes) -> str:
    """
    Hash bytes with BLAKE3, return hex digest (64 hex chars).
    """
    return blake3(b).hexdigest()


def hash_grid(G: np.ndarray) -> str:
    """
    Hash a dense color grid (int32_le row-major, -1 for absent cells).
    """
    return hash_bytes(to_bytes_grid(G))


def hash_payload(entry: str, *args: str) -> str:
    """
    Hash one submission: entry-point name plus its hex arguments.

    Fields are joined with ':' so ("a", "0x01") and ("a:0x", "01")
    cannot collide.
    """
    return hash_bytes(":".join((entry,) + args).encode())

# packages/rbcodec/src/rbcodec/columns.py
from __future__ import annotations
from typing import Optional

import numpy as np

from .errors import CorruptBasket

__all__ = ["as_array"]


def as_array(
    payload: bytes | bytearray | memoryview,
    dtype: str | np.dtype,
    n_entries: Optional[int] = None,
    per_entry: int = 1,
) -> np.ndarray:
    """
    View a trimmed basket payload as a fixed-width column.

    Values are stored big-endian; the returned array is a native-endian copy.
    With `n_entries`, the element count must be `n_entries * per_entry` and
    `per_entry > 1` reshapes to `(n_entries, per_entry)` (e.g. 5 floats of
    track parameters per entry).
    """
    if per_entry < 1:
        raise ValueError("as_array: per_entry must be >= 1")
    dt = np.dtype(dtype).newbyteorder(">")
    if len(payload) % dt.itemsize:
        raise CorruptBasket(
            f"payload of {len(payload)} bytes is not a multiple of {dt.itemsize}-byte {dt.name}"
        )
    arr = np.frombuffer(payload, dtype=dt).astype(dt.newbyteorder("="))
    if n_entries is None:
        if arr.size % per_entry:
            raise CorruptBasket(f"{arr.size} values do not split into entries of {per_entry}")
        return arr if per_entry == 1 else arr.reshape(-1, per_entry)
    if arr.size != n_entries * per_entry:
        raise CorruptBasket(
            f"{arr.size} values for {n_entries} entries of {per_entry} (expected {n_entries * per_entry})"
        )
    return arr if per_entry == 1 else arr.reshape(n_entries, per_entry)

# packages/rbcodec/src/rbcodec/container.py
from __future__ import annotations
import os
from pathlib import Path
from typing import Optional, Tuple, Union

from .basket import decode_basket
from .config import DecodeConfig
from .errors import BasketIOError, ContainerConsumed
from .key import KeyHeader, unpack_key_header

"""
Basket containers
=================

A basket reaches the decoder in one of two forms:

- `InMemory(data)`   : the stored block is already in memory (inlined baskets).
- `OnDisk(path, offset, length)` : where to read the block; no handle is held.

Both are consumed by `resolve`, exactly once. An `OnDisk` resolution opens,
seeks, reads and closes its own handle, so independent containers pointing at
the same file can be resolved from different threads without locking.
"""

__all__ = ["InMemory", "OnDisk", "Container", "resolve", "read_basket"]


class _OneShot:
    __slots__ = ("_consumed",)

    def __init__(self) -> None:
        self._consumed = False

    @property
    def consumed(self) -> bool:
        return self._consumed

    def _consume(self) -> None:
        if self._consumed:
            raise ContainerConsumed(f"{type(self).__name__} container already resolved")
        self._consumed = True

    def __copy__(self):
        raise TypeError(f"{type(self).__name__} containers cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError(f"{type(self).__name__} containers cannot be copied")

    def resolve(self) -> Tuple[KeyHeader, bytes]:
        return resolve(self)  # type: ignore[arg-type]


class InMemory(_OneShot):
    """A stored block already read into memory (key header included)."""

    __slots__ = ("_data",)

    def __init__(self, data: bytes | bytearray | memoryview):
        super().__init__()
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError("InMemory: `data` must be bytes-like")
        self._data: Optional[bytes] = bytes(data)

    def __len__(self) -> int:
        return len(self._data) if self._data is not None else 0

    def __repr__(self) -> str:
        state = "consumed" if self._consumed else f"{len(self)} bytes"
        return f"InMemory({state})"

    def _take(self) -> bytes:
        self._consume()
        data, self._data = self._data, None
        assert data is not None
        return data


class OnDisk(_OneShot):
    """`length` bytes at `offset` in the file at `path`; opened only on resolve."""

    __slots__ = ("path", "offset", "length")

    def __init__(self, path: str | os.PathLike[str], offset: int, length: int):
        super().__init__()
        if int(offset) < 0:
            raise ValueError("OnDisk: offset must be >= 0")
        if int(length) < 0:
            raise ValueError("OnDisk: length must be >= 0")
        self.path = Path(path)
        self.offset = int(offset)
        self.length = int(length)

    def __repr__(self) -> str:
        return f"OnDisk({str(self.path)!r}, offset={self.offset}, length={self.length})"

    def _take(self) -> bytes:
        self._consume()
        try:
            with open(self.path, "rb") as f:
                f.seek(self.offset)
                buf = f.read(self.length)
        except OSError as e:
            raise BasketIOError(
                e.errno, f"cannot read {self.length} bytes at offset {self.offset}: {e.strerror or e}",
                str(self.path),
            ) from e
        if len(buf) != self.length:
            raise BasketIOError(
                f"short read in {self.path}: {len(buf)} of {self.length} bytes at offset {self.offset}"
            )
        return buf


Container = Union[InMemory, OnDisk]


def resolve(container: Container) -> Tuple[KeyHeader, bytes]:
    """
    Consume `container` → (key header, bytes following the key fields).

    The returned bytes start with the basket sub-header; they are the input
    of `decode_basket`.

    Raises
    ------
    ContainerConsumed
        The container was already resolved.
    BasketIOError
        Open/seek/read failure or short read (`OnDisk` only).
    MalformedHeader
        The key header cannot be parsed.
    """
    match container:
        case InMemory() | OnDisk():
            raw = container._take()
        case _:
            raise TypeError(f"resolve: not a basket container: {type(container).__name__}")
    header, payload_offset = unpack_key_header(raw)
    return header, raw[payload_offset:]


def read_basket(container: Container, config: Optional[DecodeConfig] = None) -> Tuple[int, bytes]:
    """Resolve and decode one basket → (n_entries, trimmed payload)."""
    header, data = resolve(container)
    return decode_basket(header, data, config)

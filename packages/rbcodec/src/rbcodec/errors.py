# packages/rbcodec/src/rbcodec/errors.py
from __future__ import annotations

__all__ = [
    "RootBasketError",
    "BasketIOError",
    "MalformedHeader",
    "UnsupportedCodec",
    "DecompressionError",
    "CorruptBasket",
    "ContainerConsumed",
]


class RootBasketError(Exception):
    """Base class of every error raised while resolving a basket."""


class BasketIOError(RootBasketError, OSError):
    """Open/seek/read failure on an on-disk basket. Not retried here."""


class MalformedHeader(RootBasketError, ValueError):
    """Truncated buffer or inconsistent length field in a key or basket header."""


class UnsupportedCodec(RootBasketError, ValueError):
    """Unknown compression magic at the start of a compressed block."""

    def __init__(self, magic: bytes):
        self.magic = bytes(magic)
        super().__init__(f"unsupported compression algorithm {self.magic!r}")


class DecompressionError(RootBasketError, ValueError):
    """Codec reported corrupt input, or the inflated size is not the declared one."""


class CorruptBasket(RootBasketError, ValueError):
    """Fill boundary of a basket lies outside its (decompressed) payload."""


class ContainerConsumed(RootBasketError, RuntimeError):
    """A container was resolved a second time."""

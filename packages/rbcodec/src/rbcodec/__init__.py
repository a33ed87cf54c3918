# packages/rbcodec/src/rbcodec/__init__.py
from __future__ import annotations

"""rbcodec - basket decoding (public surface).

Key header parsing, compression dispatch, basket trim and the two basket
containers. Pure decode library: no logging, no retries, no shared state.
"""

__version__ = "0.3.0"

from .config import DecodeConfig
from .paths import PathsConfig
from .errors import (
    RootBasketError, BasketIOError, MalformedHeader,
    UnsupportedCodec, DecompressionError, CorruptBasket, ContainerConsumed,
)
from .key import KeyHeader, unpack_key_header
from .compression import Codec, decompress, sniff_codec
from .basket import BasketHeader, unpack_basket_header, decode_basket
from .container import InMemory, OnDisk, Container, resolve, read_basket
from .columns import as_array

__all__ = [
    "__version__",
    "DecodeConfig", "PathsConfig",
    "RootBasketError", "BasketIOError", "MalformedHeader",
    "UnsupportedCodec", "DecompressionError", "CorruptBasket", "ContainerConsumed",
    "KeyHeader", "unpack_key_header",
    "Codec", "decompress", "sniff_codec",
    "BasketHeader", "unpack_basket_header", "decode_basket",
    "InMemory", "OnDisk", "Container", "resolve", "read_basket",
    "as_array",
]

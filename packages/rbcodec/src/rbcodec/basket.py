# packages/rbcodec/src/rbcodec/basket.py
# -----------------------------------------------------------------------------
# Basket decoding: sub-header, conditional inflation, fill-boundary trim.

from __future__ import annotations
import struct
from dataclasses import dataclass
from typing import Optional, Tuple

from .compression import decompress
from .config import DecodeConfig
from .errors import CorruptBasket, MalformedHeader
from .key import Cursor, KeyHeader

__all__ = [
    "BasketHeader",
    "BASKET_HEADER_SIZE",
    "unpack_basket_header",
    "decode_basket",
]

#: version u16 | buffer_size u32 | entry_size u32 | n_entries u32 | last_offset u32 | flag i8
BASKET_HEADER_FMT = ">HIIIIb"
BASKET_HEADER_SIZE = struct.calcsize(BASKET_HEADER_FMT)  # = 19 bytes

_DEFAULT_CONFIG = DecodeConfig()


@dataclass(frozen=True)
class BasketHeader:
    version: int
    buffer_size: int
    entry_size: int
    n_entries: int
    last_offset: int  # file-absolute end of the filled region, key included
    flag: int


def unpack_basket_header(buf: bytes | bytearray | memoryview) -> Tuple[BasketHeader, int]:
    """Parse the basket sub-header at the front of `buf` → (header, bytes consumed)."""
    cur = Cursor(buf)
    h = BasketHeader(
        version=cur.u16("basket version"),
        buffer_size=cur.u32("buffer_size"),
        entry_size=cur.u32("entry_size"),
        n_entries=cur.u32("n_entries"),
        last_offset=cur.u32("last_offset"),
        flag=cur.i8("flag"),
    )
    return h, cur.pos


def decode_basket(
    header: KeyHeader,
    data: bytes | bytearray | memoryview,
    config: Optional[DecodeConfig] = None,
) -> Tuple[int, bytes]:
    """
    Turn the bytes following a key header into `(n_entries, payload)`.

    Parameters
    ----------
    header : KeyHeader
        Key header of the basket, as returned by `unpack_key_header`.
    data : bytes-like
        Everything after the key fields: basket sub-header, then the payload
        (compressed or not).
    config : DecodeConfig, optional
        Decoder options; defaults to `DecodeConfig()`.

    Returns
    -------
    (n_entries, payload) : (int, bytes)
        `payload` holds exactly `last_offset - key_len` bytes: the filled
        region of the basket buffer, without the unused capacity.

    Details
    -------
    1. The payload is compressed when the key declares more bytes than are
       physically present; it is then inflated to `header.uncompressed_len`.
    2. `last_offset` counts from the start of the key, while the payload
       starts right after it: subtracting `key_len` re-bases the boundary.

    Raises
    ------
    MalformedHeader
        Truncated sub-header, misaligned key (when checked), or a declared
        size above `config.max_basket_bytes`.
    UnsupportedCodec, DecompressionError
        From the codec dispatcher.
    CorruptBasket
        Fill boundary before the payload start or past its end.
    """
    cfg = config or _DEFAULT_CONFIG
    bh, consumed = unpack_basket_header(data)

    if cfg.check_key_alignment:
        end_of_subheader = header.encoded_len + consumed
        if end_of_subheader != header.key_len:
            raise MalformedHeader(
                f"basket sub-header ends at {end_of_subheader}, key_len is {header.key_len}"
            )

    raw = memoryview(data)[consumed:]
    if header.uncompressed_len > len(raw):
        if header.uncompressed_len > cfg.max_basket_bytes:
            raise MalformedHeader(
                f"declared uncompressed_len {header.uncompressed_len} above limit {cfg.max_basket_bytes}"
            )
        payload = decompress(raw, header.uncompressed_len)
    else:
        payload = raw

    useful_bytes = bh.last_offset - header.key_len
    if useful_bytes < 0:
        raise CorruptBasket(
            f"last_offset {bh.last_offset} lies before the payload start (key_len {header.key_len})"
        )
    if useful_bytes > len(payload):
        raise CorruptBasket(
            f"last_offset {bh.last_offset} needs {useful_bytes} payload bytes, only {len(payload)} available"
        )
    return bh.n_entries, bytes(payload[:useful_bytes])

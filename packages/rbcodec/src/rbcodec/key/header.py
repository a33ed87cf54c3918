# packages/rbcodec/src/rbcodec/key/header.py
from __future__ import annotations
import datetime as _dt
from dataclasses import dataclass
from typing import Optional, Tuple

from ..errors import MalformedHeader
from .cursor import Cursor, tstring_size

"""
Key header (TKey)
=================

Every block stored in a container file starts with a key header. Big-endian,
no optional field, no alignment padding.

    u32    total_bytes        # key + payload as stored on disk
    u16    version            # > 1000 → 64-bit seek pointers
    u32    uncompressed_len   # object length once inflated
    u32    timestamp          # packed datime
    u16    key_len            # length of the whole key (used to re-base offsets)
    u16    cycle
    u32|64 seek_key
    u32|64 seek_pdir
    str    class_name         # u8 length (+ u32 if length byte == 255) + bytes
    str    name
    str    title

For a basket, `key_len` also covers the basket sub-header that follows the
title string: the payload proper starts `key_len` bytes after the key start.
"""

__all__ = ["KeyHeader", "unpack_key_header", "KEY_FIXED_SIZE", "LARGE_FILE_VERSION"]

# versions above this threshold store 64-bit seek pointers
LARGE_FILE_VERSION = 1000

# u32 + u16 + u32 + u32 + u16 + u16 + 2*u32 (small-file layout, strings excluded)
KEY_FIXED_SIZE = 26


@dataclass(frozen=True)
class KeyHeader:
    total_bytes: int
    version: int
    uncompressed_len: int
    timestamp: int
    key_len: int
    cycle: int
    seek_key: int
    seek_pdir: int
    class_name: str
    name: str
    title: str

    @property
    def is_large(self) -> bool:
        return self.version > LARGE_FILE_VERSION

    @property
    def compressed_len(self) -> int:
        """Bytes of payload physically stored after the key."""
        return self.total_bytes - self.key_len

    @property
    def encoded_len(self) -> int:
        """Size of the key fields themselves (without any basket sub-header)."""
        seeks = 16 if self.is_large else 8
        return (KEY_FIXED_SIZE - 8 + seeks
                + tstring_size(self.class_name)
                + tstring_size(self.name)
                + tstring_size(self.title))

    @property
    def datetime(self) -> Optional[_dt.datetime]:
        """Decoded `timestamp`, or None when it was never set (packed value 0)."""
        d = self.timestamp
        if d == 0:
            return None
        try:
            return _dt.datetime(
                (d >> 26) + 1995,
                (d >> 22) & 0xF,
                (d >> 17) & 0x1F,
                (d >> 12) & 0x1F,
                (d >> 6) & 0x3F,
                d & 0x3F,
            )
        except ValueError as e:
            raise MalformedHeader(f"timestamp {d:#010x} is not a valid date: {e}") from e


def unpack_key_header(buf: bytes | bytearray | memoryview, offset: int = 0) -> Tuple[KeyHeader, int]:
    """
    Parse the key header found at `buf[offset:]`.

    Returns
    -------
    (KeyHeader, payload_offset)
        `payload_offset` is absolute within `buf`: the first byte after the
        title string.

    Raises
    ------
    MalformedHeader
        On any short read, if `key_len > total_bytes`, if `key_len` exceeds
        the bytes available, or if `key_len` is shorter than the key fields.
    """
    cur = Cursor(buf, offset)
    if cur.remaining < KEY_FIXED_SIZE:
        raise MalformedHeader(
            f"key header needs at least {KEY_FIXED_SIZE} bytes, got {cur.remaining}"
        )
    total_bytes = cur.u32("total_bytes")
    version = cur.u16("version")
    uncompressed_len = cur.u32("uncompressed_len")
    timestamp = cur.u32("timestamp")
    key_len = cur.u16("key_len")
    cycle = cur.u16("cycle")
    if version > LARGE_FILE_VERSION:
        seek_key = cur.u64("seek_key")
        seek_pdir = cur.u64("seek_pdir")
    else:
        seek_key = cur.u32("seek_key")
        seek_pdir = cur.u32("seek_pdir")
    class_name = cur.tstring("class_name")
    name = cur.tstring("name")
    title = cur.tstring("title")

    if key_len > total_bytes:
        raise MalformedHeader(f"key_len {key_len} larger than total_bytes {total_bytes}")
    if key_len > len(cur) - offset:
        raise MalformedHeader(f"key_len {key_len} larger than the {len(cur) - offset} bytes available")
    if key_len < cur.pos - offset:
        raise MalformedHeader(f"key_len {key_len} shorter than the {cur.pos - offset} bytes of key fields")

    h = KeyHeader(
        total_bytes=total_bytes,
        version=version,
        uncompressed_len=uncompressed_len,
        timestamp=timestamp,
        key_len=key_len,
        cycle=cycle,
        seek_key=seek_key,
        seek_pdir=seek_pdir,
        class_name=class_name,
        name=name,
        title=title,
    )
    return h, cur.pos

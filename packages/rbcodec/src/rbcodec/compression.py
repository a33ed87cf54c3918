# packages/rbcodec/src/rbcodec/compression.py
# -----------------------------------------------------------------------------
# Compressed blocks - identification by magic prefix and full inflation.

from __future__ import annotations
import enum
import lzma
import zlib
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

import lz4.block
import zstandard

from .errors import DecompressionError, UnsupportedCodec

"""
Compression framing
===================

A compressed object is a sequence of one or more blocks. Each block is a
9-byte header followed by the codec bytes; blocks are inflated in order and
concatenated. A single block never inflates to more than 16 MiB, so large
baskets are stored as several blocks.

Block header
------------
[0:2]   magic                    # algorithm, see `Codec`
[2]     method                   # codec-specific, informational
[3:6]   u24 compressed size      # little-endian, bytes after this header
[6:9]   u24 uncompressed size    # little-endian

Per-codec body
--------------
ZL   zlib stream (deflate with zlib wrapper)
XZ   xz container (LZMA2)
L4   u64 xxhash64 checksum of the LZ4 data + LZ4 block
ZS   zstandard frame
CS   legacy deflate: raw deflate stream, no wrapper

Notes
-----
- Pure functions, no I/O, no shared state: safe to call from many threads.
- The LZ4 checksum is stripped, not verified.
- A block never inflates past its declared uncompressed size.
"""

__all__ = [
    "Codec",
    "CompressionBlockHeader",
    "BLOCK_HEADER_SIZE",
    "unpack_block_header",
    "sniff_codec",
    "decompress",
]

BLOCK_HEADER_SIZE = 9
_LZ4_CHECKSUM_SIZE = 8


class Codec(enum.Enum):
    ZLIB = b"ZL"
    LZMA = b"XZ"
    LZ4 = b"L4"
    ZSTD = b"ZS"
    LEGACY = b"CS"

    @property
    def magic(self) -> bytes:
        return self.value

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class CompressionBlockHeader:
    codec: Codec
    method: int
    compressed_size: int
    uncompressed_size: int


def _u24le(b: bytes) -> int:
    return b[0] | (b[1] << 8) | (b[2] << 16)


def sniff_codec(raw: bytes | bytearray | memoryview) -> Optional[Codec]:
    """Codec announced by the first block of `raw`, or None if unknown/too short."""
    magic = bytes(raw[:2])
    try:
        return Codec(magic)
    except ValueError:
        return None


def unpack_block_header(raw: bytes | bytearray | memoryview, offset: int = 0) -> CompressionBlockHeader:
    head = bytes(raw[offset:offset + BLOCK_HEADER_SIZE])
    if len(head) >= 2 and sniff_codec(head) is None:
        raise UnsupportedCodec(head[:2])
    if len(head) < BLOCK_HEADER_SIZE:
        raise DecompressionError(
            f"truncated compression block header at offset {offset}: {len(head)} of {BLOCK_HEADER_SIZE} bytes"
        )
    return CompressionBlockHeader(
        codec=Codec(head[:2]),
        method=head[2],
        compressed_size=_u24le(head[3:6]),
        uncompressed_size=_u24le(head[6:9]),
    )


# -----------------------------------------------------------------------------
# Per-codec inflaters: body bytes + declared size → inflated bytes
# -----------------------------------------------------------------------------
# Every inflater stops one byte past the declared size, so a lying header
# never makes the output grow beyond it.
def _finish_stream(d, out: bytes, size: int, what: str) -> bytes:
    if len(out) > size:
        raise DecompressionError(f"{what} stream inflates past the declared {size} bytes")
    if not d.eof:
        raise DecompressionError(f"{what} stream ends early, {len(out)} of {size} bytes")
    if d.unused_data:
        raise DecompressionError(f"{len(d.unused_data)} trailing bytes after the {what} stream")
    return out


def _inflate_deflate(body: bytes, size: int, wbits: int, what: str) -> bytes:
    d = zlib.decompressobj(wbits)
    return _finish_stream(d, d.decompress(body, size + 1), size, what)


def _inflate_zlib(body: bytes, size: int) -> bytes:
    return _inflate_deflate(body, size, zlib.MAX_WBITS, "zlib")


def _inflate_legacy(body: bytes, size: int) -> bytes:
    return _inflate_deflate(body, size, -zlib.MAX_WBITS, "legacy deflate")


def _inflate_lzma(body: bytes, size: int) -> bytes:
    d = lzma.LZMADecompressor()
    return _finish_stream(d, d.decompress(body, max_length=size + 1), size, "xz")


def _inflate_lz4(body: bytes, size: int) -> bytes:
    if len(body) < _LZ4_CHECKSUM_SIZE:
        raise DecompressionError("LZ4 block shorter than its checksum")
    return lz4.block.decompress(body[_LZ4_CHECKSUM_SIZE:], uncompressed_size=size)


def _inflate_zstd(body: bytes, size: int) -> bytes:
    # the frame may carry its own content size, which the library trusts
    declared = zstandard.frame_content_size(body)
    if declared not in (-1, size):
        raise DecompressionError(f"zstd frame declares {declared} bytes, block header {size}")
    return zstandard.ZstdDecompressor().decompress(body, max_output_size=size)


_INFLATERS: Dict[Codec, Callable[[bytes, int], bytes]] = {
    Codec.ZLIB: _inflate_zlib,
    Codec.LZMA: _inflate_lzma,
    Codec.LZ4: _inflate_lz4,
    Codec.ZSTD: _inflate_zstd,
    Codec.LEGACY: _inflate_legacy,
}

# exceptions the codec libraries use to report corrupt input
_CODEC_ERRORS: Tuple[type, ...] = (
    zlib.error,
    lzma.LZMAError,
    lz4.block.LZ4BlockError,
    zstandard.ZstdError,
)


def decompress(raw: bytes | bytearray | memoryview, target_len: int) -> bytes:
    """
    Inflate every compression block of `raw` into exactly `target_len` bytes.

    Parameters
    ----------
    raw : bytes-like
        Compressed object, starting with the first block header.
    target_len : int
        Declared uncompressed size of the whole object.

    Returns
    -------
    bytes
        The inflated buffer, `len(...) == target_len`.

    Raises
    ------
    UnsupportedCodec
        Unknown magic on any block.
    DecompressionError
        Truncated block, codec failure, or size mismatch (per block or total).
    """
    if target_len < 0:
        raise ValueError("decompress: target_len must be >= 0")
    src = memoryview(raw)
    out = bytearray()
    off = 0
    while len(out) < target_len:
        h = unpack_block_header(src, off)
        start = off + BLOCK_HEADER_SIZE
        end = start + h.compressed_size
        if end > len(src):
            raise DecompressionError(
                f"{h.codec.label} block at offset {off} declares {h.compressed_size} bytes, "
                f"only {len(src) - start} present"
            )
        if h.uncompressed_size == 0:
            raise DecompressionError(f"empty {h.codec.label} block at offset {off}")
        if len(out) + h.uncompressed_size > target_len:
            raise DecompressionError(
                f"{h.codec.label} block at offset {off} declares {h.uncompressed_size} bytes, "
                f"only {target_len - len(out)} left of {target_len}"
            )
        try:
            chunk = _INFLATERS[h.codec](bytes(src[start:end]), h.uncompressed_size)
        except _CODEC_ERRORS as e:
            raise DecompressionError(f"{h.codec.label} block at offset {off}: {e}") from e
        if len(chunk) != h.uncompressed_size:
            raise DecompressionError(
                f"{h.codec.label} block at offset {off} inflated to {len(chunk)} bytes, "
                f"header declares {h.uncompressed_size}"
            )
        out += chunk
        off = end
    if len(out) != target_len:
        raise DecompressionError(f"inflated {len(out)} bytes, expected {target_len}")
    return bytes(out)

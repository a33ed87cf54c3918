# tests/rootfixtures.py
# Synthetic stored blocks (key header + basket sub-header + payload), built
# with the real codec libraries so the decoder is exercised end to end.
from __future__ import annotations
import lzma
import struct
import zlib
from pathlib import Path

import lz4.block
import zstandard

DATIME_2010 = ((2010 - 1995) << 26) | (11 << 22) | (25 << 17) | (12 << 12) | (30 << 6) | 15


def tstring(s: str) -> bytes:
    b = s.encode("latin-1")
    if len(b) >= 255:
        return b"\xff" + struct.pack(">I", len(b)) + b
    return bytes([len(b)]) + b


def key_fields(*, total_bytes: int, version: int, uncompressed_len: int, timestamp: int,
               key_len: int, cycle: int = 1, seek_key: int = 100, seek_pdir: int = 58,
               class_name: str = "TBasket", name: str = "one", title: str = "a simple test tree") -> bytes:
    seek_fmt = "QQ" if version > 1000 else "II"
    head = struct.pack(">IHIIHH" + seek_fmt, total_bytes, version, uncompressed_len, timestamp,
                       key_len, cycle, seek_key, seek_pdir)
    return head + tstring(class_name) + tstring(name) + tstring(title)


def basket_subheader(*, n_entries: int, last_offset: int, version: int = 3,
                     buffer_size: int = 32000, entry_size: int = 4, flag: int = 0) -> bytes:
    return struct.pack(">HIIIIb", version, buffer_size, entry_size, n_entries, last_offset, flag)


def _block(magic: bytes, method: int, body: bytes, usize: int) -> bytes:
    return magic + bytes([method]) + len(body).to_bytes(3, "little") + usize.to_bytes(3, "little") + body


def compress_root(data: bytes, codec: str = "ZL", block_size: int | None = None) -> bytes:
    """Frame `data` as ROOT compression blocks of at most `block_size` input bytes."""
    step = block_size or max(len(data), 1)
    out = bytearray()
    for i in range(0, len(data), step):
        part = data[i:i + step]
        if codec == "ZL":
            out += _block(b"ZL", 8, zlib.compress(part), len(part))
        elif codec == "CS":
            c = zlib.compressobj(6, zlib.DEFLATED, -zlib.MAX_WBITS)
            out += _block(b"CS", 8, c.compress(part) + c.flush(), len(part))
        elif codec == "XZ":
            out += _block(b"XZ", 0, lzma.compress(part), len(part))
        elif codec == "L4":
            body = b"\x00" * 8 + lz4.block.compress(part, store_size=False)
            out += _block(b"L4", 1, body, len(part))
        elif codec == "ZS":
            out += _block(b"ZS", 1, zstandard.ZstdCompressor().compress(part), len(part))
        else:
            raise ValueError(codec)
    return bytes(out)


def build_basket(payload: bytes, n_entries: int, *, codec: str | None = None,
                 last_offset: int | None = None, uncompressed_len: int | None = None,
                 version: int = 4, class_name: str = "TBasket", name: str = "one",
                 title: str = "a simple test tree", block_size: int | None = None) -> bytes:
    """One stored basket. `payload` is the uncompressed buffer (unused capacity included)."""
    seeks = 16 if version > 1000 else 8
    key_len = (18 + seeks + len(tstring(class_name)) + len(tstring(name)) + len(tstring(title))
               + 19)
    stored = compress_root(payload, codec, block_size) if codec else payload
    if codec and len(stored) >= len(payload):
        raise ValueError("fixture payload does not shrink when compressed")
    if last_offset is None:
        last_offset = key_len + len(payload)
    if uncompressed_len is None:
        uncompressed_len = len(payload)
    key = key_fields(total_bytes=key_len + len(stored), version=version,
                     uncompressed_len=uncompressed_len, timestamp=DATIME_2010, key_len=key_len,
                     class_name=class_name, name=name, title=title)
    return key + basket_subheader(n_entries=n_entries, last_offset=last_offset) + stored


def write_at(path: Path, offset: int, block: bytes, trailer: bytes = b"") -> Path:
    """Write `block` at `offset` in a fresh file, padded with a recognisable filler."""
    filler = bytes(i & 0xFF for i in range(offset))
    path.write_bytes(filler + block + trailer)
    return path

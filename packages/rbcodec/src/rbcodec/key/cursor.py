# packages/rbcodec/src/rbcodec/key/cursor.py
from __future__ import annotations
import struct

from ..errors import MalformedHeader

_BE = ">"  # big-endian, as every field of the container format

_U8 = struct.Struct(_BE + "B")
_I8 = struct.Struct(_BE + "b")
_U16 = struct.Struct(_BE + "H")
_U32 = struct.Struct(_BE + "I")
_U64 = struct.Struct(_BE + "Q")

# length byte value announcing a u32 length (long strings)
_LONG_STRING = 255


class Cursor:
    """Forward-only big-endian reader over a byte buffer.

    Every read is bounds-checked; a short read raises `MalformedHeader` naming
    the field that was being read. The cursor never copies the underlying
    buffer except in `take`.
    """

    __slots__ = ("_buf", "pos")

    def __init__(self, buf: bytes | bytearray | memoryview, pos: int = 0):
        self._buf = memoryview(buf)
        if not (0 <= pos <= len(self._buf)):
            raise MalformedHeader(f"start offset {pos} outside buffer of {len(self._buf)} bytes")
        self.pos = pos

    def __len__(self) -> int:
        return len(self._buf)

    @property
    def remaining(self) -> int:
        return len(self._buf) - self.pos

    def _need(self, n: int, what: str) -> None:
        if n > self.remaining:
            raise MalformedHeader(
                f"truncated {what}: need {n} bytes at offset {self.pos}, {self.remaining} left"
            )

    def _unpack(self, st: struct.Struct, what: str) -> int:
        self._need(st.size, what)
        (v,) = st.unpack_from(self._buf, self.pos)
        self.pos += st.size
        return int(v)

    def u8(self, what: str = "u8") -> int:
        return self._unpack(_U8, what)

    def i8(self, what: str = "i8") -> int:
        return self._unpack(_I8, what)

    def u16(self, what: str = "u16") -> int:
        return self._unpack(_U16, what)

    def u32(self, what: str = "u32") -> int:
        return self._unpack(_U32, what)

    def u64(self, what: str = "u64") -> int:
        return self._unpack(_U64, what)

    def take(self, n: int, what: str = "bytes") -> bytes:
        if n < 0:
            raise MalformedHeader(f"negative length {n} for {what}")
        self._need(n, what)
        out = bytes(self._buf[self.pos:self.pos + n])
        self.pos += n
        return out

    def tstring(self, what: str = "string") -> str:
        """Length-prefixed string: u8 length, or 255 followed by a u32 length."""
        n = self.u8(what + " length")
        if n == _LONG_STRING:
            n = self.u32(what + " long length")
        return self.take(n, what).decode("latin-1")


def tstring_size(s: str) -> int:
    """Encoded size of a length-prefixed string (prefix included)."""
    n = len(s.encode("latin-1"))
    return n + (5 if n >= _LONG_STRING else 1)

# packages/rbcodec/src/rbcodec/key/__init__.py
from __future__ import annotations

from .cursor import Cursor
from .header import KeyHeader, unpack_key_header, KEY_FIXED_SIZE, LARGE_FILE_VERSION

__all__ = [
    "Cursor",
    "KeyHeader", "unpack_key_header",
    "KEY_FIXED_SIZE", "LARGE_FILE_VERSION",
]

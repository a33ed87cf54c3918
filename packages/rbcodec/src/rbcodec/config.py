# packages/rbcodec/src/rbcodec/config.py
from __future__ import annotations
import os
from dataclasses import dataclass

__all__ = ["DecodeConfig"]


def _env_flag(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True, slots=True)
class DecodeConfig:
    """
    Public, stable configuration of the basket decoder.

    Consumed by `rbcodec.basket.decode_basket` and `rbcodec.container.read_basket`.
    Every field has a default matching the plain decoding rules, so passing
    no config at all is always valid.

    Fields
    ------
    check_key_alignment : bool, default=False
        Require the basket sub-header to end exactly `key_len` bytes after the
        key start. Off by default: the trim arithmetic assumes no padding
        between key and sub-header, this flag turns that assumption into a check.
    max_basket_bytes : int, default=1 GiB
        Largest declared `uncompressed_len` accepted before inflating. Guards
        against allocating from a corrupt length field.

    Notes
    -----
    - Immutable (`frozen=True`) so one instance can be shared by every worker.
    - Bounds violations raise `ValueError`.
    """

    check_key_alignment: bool = False
    max_basket_bytes: int = 1 << 30

    def __post_init__(self) -> None:
        if int(self.max_basket_bytes) <= 0:
            raise ValueError("DecodeConfig.max_basket_bytes must be > 0")

    @staticmethod
    def from_env() -> "DecodeConfig":
        """
        ENV keys
        --------
        ROOTBASKET_CHECK_ALIGNMENT   → check_key_alignment (1/true/yes/on)
        ROOTBASKET_MAX_BASKET_BYTES  → max_basket_bytes (int)
        """
        max_bytes = os.getenv("ROOTBASKET_MAX_BASKET_BYTES")
        return DecodeConfig(
            check_key_alignment=_env_flag("ROOTBASKET_CHECK_ALIGNMENT", False),
            max_basket_bytes=int(max_bytes) if max_bytes else 1 << 30,
        )

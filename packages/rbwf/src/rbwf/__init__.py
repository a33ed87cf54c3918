# packages/rbwf/src/rbwf/__init__.py
from __future__ import annotations

from .api import read_baskets, iter_baskets, concat_payloads

__all__ = [
    "read_baskets",
    "iter_baskets",
    "concat_payloads",
    # the cli sub-package is not imported here to keep the top-level import light
]

__version__ = "0.3.0"

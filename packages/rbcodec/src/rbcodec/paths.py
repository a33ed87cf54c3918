from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import os

@dataclass(frozen=True)
class PathsConfig:
    """Location of local data files, injected by the caller or read from ENV.

    ENV keys
    --------
    ROOTBASKET_DATA_DIR → root of locally downloaded container files (read-only)
    """
    data_dir: Path | None = None

    @staticmethod
    def from_env() -> "PathsConfig":
        return PathsConfig(data_dir=_opt_env("ROOTBASKET_DATA_DIR"))

    # Accessor (explicit → ENV fallback)
    def data(self) -> Path | None: return self.data_dir or _opt_env("ROOTBASKET_DATA_DIR")

    def resolve(self, path: str | os.PathLike[str]) -> Path:
        """Anchor a relative path on the data dir; absolute paths pass through."""
        p = Path(path)
        if p.is_absolute():
            return p
        root = self.data()
        return root / p if root else p

def _opt_env(name: str) -> Path | None:
    v = os.getenv(name)
    return Path(v) if v else None

__all__ = ["PathsConfig"]

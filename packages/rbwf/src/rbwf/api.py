from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from rbcodec import Container, DecodeConfig, read_basket

log = logging.getLogger(__name__)

__all__ = ["read_baskets", "iter_baskets", "concat_payloads"]


def _read_one(i: int, container: Container, config: Optional[DecodeConfig]) -> Tuple[int, bytes]:
    n, payload = read_basket(container, config)
    log.debug("basket #%d %r → %d entries, %d bytes", i, container, n, len(payload))
    return n, payload


def iter_baskets(
    containers: Iterable[Container],
    workers: int = 1,
    config: Optional[DecodeConfig] = None,
) -> Iterator[Tuple[int, bytes]]:
    """Yield `(n_entries, payload)` per container, in input order.

    With `workers > 1` the containers are resolved on a thread pool; each
    on-disk container opens its own handle, so nothing is shared. The first
    failure is re-raised to the caller (remaining work is still drained by the
    pool on exit).
    """
    if workers is None or workers < 1:
        workers = 1
    if workers == 1:
        for i, c in enumerate(containers):
            yield _read_one(i, c, config)
        return
    with ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(_read_one, i, c, config) for i, c in enumerate(containers)]
        for fut in futures:
            yield fut.result()


def read_baskets(
    containers: Iterable[Container],
    workers: int = 1,
    config: Optional[DecodeConfig] = None,
) -> List[Tuple[int, bytes]]:
    """Eager form of `iter_baskets`."""
    return list(iter_baskets(containers, workers=workers, config=config))


def concat_payloads(results: Sequence[Tuple[int, bytes]]) -> Tuple[int, bytes]:
    """Join per-basket results of one branch → (total entries, contiguous payload)."""
    total = sum(n for n, _ in results)
    return total, b"".join(p for _, p in results)

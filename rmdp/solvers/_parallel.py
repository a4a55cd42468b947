"""Bounded fan-out / fan-in over contiguous state index ranges.

``fan_out(n, fill, config)`` calls ``fill(start, stop)`` for consecutive
chunks of ``range(n)`` and returns once every chunk has finished. Each call
must write only to the output slots of its own range, so no locking is
needed. The first exception raised by a worker is re-raised in the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from rmdp.config import DEFAULT_CONFIG, EvaluationConfig

logger = logging.getLogger(__name__)


def chunk_ranges(n: int, chunk_size: int) -> list[tuple[int, int]]:
    """Split ``range(n)`` into (start, stop) pairs of at most chunk_size.

    Examples:
        >>> chunk_ranges(5, 2)
        [(0, 2), (2, 4), (4, 5)]
    """
    return [(start, min(start + chunk_size, n)) for start in range(0, n, chunk_size)]


def fan_out(
    n: int,
    fill: Callable[[int, int], None],
    config: EvaluationConfig | None = None,
) -> None:
    cfg = config or DEFAULT_CONFIG
    if n == 0:
        return
    if n < cfg.parallel_threshold or cfg.max_workers == 1:
        fill(0, n)
        return

    ranges = chunk_ranges(n, cfg.chunk_size)
    logger.debug(
        "fan_out: %d states in %d chunks (max_workers=%s)", n, len(ranges), cfg.max_workers
    )
    with ThreadPoolExecutor(max_workers=cfg.max_workers) as pool:
        futures = [pool.submit(fill, start, stop) for start, stop in ranges]
        for future in futures:
            future.result()

"""
Strategy benchmark: fill and drain a priority queue, recording merge cost.
"""

import random
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Sequence

from .config import Settings
from .logging import get_logger
from .structures import SVQueue

logger = get_logger(__name__)


@dataclass(frozen=True)
class BenchmarkResult:
    """Cost counters for one strategy over one workload."""
    strategy: str
    count: int
    merges: int
    elements_touched: int
    max_touched: int
    max_blocks_merged: int
    blocks: int
    rebuilds: int
    insert_seconds: float
    drain_seconds: float

    @property
    def touched_per_insert(self) -> float:
        return self.elements_touched / self.count if self.count else 0.0

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["touched_per_insert"] = self.touched_per_insert
        return result


def random_workload(count: int, seed: int = 42) -> List[int]:
    rng = random.Random(seed)
    return [rng.randint(-2 ** 31, 2 ** 31 - 1) for _ in range(count)]


def run_benchmark(strategy: str, values: Sequence[int], drain: bool = True) -> BenchmarkResult:
    """
    Push ``values`` into an ``SVQueue`` under ``strategy``, then pop them all.

    Raises:
        ValueError: If ``strategy`` is unknown.
    """
    queue: SVQueue[int] = SVQueue(settings=Settings(strategy=strategy))

    started = time.perf_counter()
    for value in values:
        queue.push(value)
    insert_seconds = time.perf_counter() - started

    stats = queue.dynamic.stats
    blocks = len(queue.dynamic.blocks())
    merges = stats.merges
    elements_touched = stats.elements_touched
    max_touched = stats.max_touched
    max_blocks_merged = stats.max_blocks_merged

    started = time.perf_counter()
    if drain:
        while queue:
            queue.pop()
    drain_seconds = time.perf_counter() - started

    result = BenchmarkResult(
        strategy=queue.dynamic.strategy.name,
        count=len(values),
        merges=merges,
        elements_touched=elements_touched,
        max_touched=max_touched,
        max_blocks_merged=max_blocks_merged,
        blocks=blocks,
        rebuilds=stats.rebuilds,
        insert_seconds=insert_seconds,
        drain_seconds=drain_seconds,
    )
    logger.info(
        f"{result.strategy}: {result.count} inserts, {result.merges} merges, "
        f"max {result.max_blocks_merged} blocks merged at once"
    )
    return result

"""
Asset Sanity - Bounded concurrent fan-out.

Runs a worker over a sequence with at most ``limit`` units in flight,
joins every unit and keeps all of their errors, not only the first.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, Iterable, Optional, TypeVar


logger = logging.getLogger(__name__)


T = TypeVar("T")
R = TypeVar("R")


@dataclass
class BatchOutcome(Generic[T, R]):
    """Per-item results (input order) and per-item failures."""
    results: list[Optional[R]] = field(default_factory=list)
    errors: list[tuple[T, Exception]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def successful(self) -> list[R]:
        return [r for r in self.results if r is not None]


async def bounded_gather(
    items: Iterable[T],
    worker: Callable[[T], Awaitable[R]],
    limit: int = 8,
) -> BatchOutcome[T, R]:
    """
    Apply ``worker`` to every item with bounded concurrency.

    Args:
        items: Inputs, processed independently
        worker: Async function called once per item
        limit: Max workers running at the same time

    Returns:
        BatchOutcome; a failed item has ``None`` in ``results`` and an
        entry in ``errors``
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")

    items = list(items)
    semaphore = asyncio.Semaphore(limit)

    async def run(item: T) -> R:
        async with semaphore:
            return await worker(item)

    done = await asyncio.gather(*(run(item) for item in items), return_exceptions=True)

    outcome: BatchOutcome[T, R] = BatchOutcome()
    for item, result in zip(items, done):
        if isinstance(result, Exception):
            logger.debug(f"Worker failed for {item!r}: {result}")
            outcome.results.append(None)
            outcome.errors.append((item, result))
        elif isinstance(result, BaseException):
            raise result
        else:
            outcome.results.append(result)

    return outcome

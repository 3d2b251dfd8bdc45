"""Settle-all fan-out over failure-prone remote calls."""

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Settled(Generic[T]):
    """Outcome of one operation: ``error`` is None on success."""

    item: T
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def settle_all(
    operation: Callable[[T], object],
    items: Sequence[T],
    *,
    max_workers: int,
    thread_name_prefix: str = "fanout",
) -> list[Settled[T]]:
    """Run ``operation`` on every item concurrently and wait for all of them.

    A failure never cancels or short-circuits the remaining operations.
    Outcomes are returned in the order of ``items``.
    """
    if not items:
        return []

    workers = max(1, min(max_workers, len(items)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=thread_name_prefix) as executor:
        futures = [executor.submit(operation, item) for item in items]
        return [Settled(item=item, error=future.exception()) for item, future in zip(items, futures)]

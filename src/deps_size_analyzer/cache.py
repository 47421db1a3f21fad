"""Per-analysis caches with single-flight get-or-compute semantics."""

from __future__ import annotations

import threading
from collections.abc import Callable, Hashable
from concurrent.futures import Future
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class SingleFlightCache(Generic[K, V]):
    """A key -> value map where each value is computed at most once.

    The first caller for a key runs the computation; concurrent callers for
    the same key block on the same future and share its result (or its
    exception). Works unchanged for a single-threaded traversal.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._futures: dict[K, Future[V]] = {}

    def get_or_compute(self, key: K, compute: Callable[[], V]) -> V:
        with self._lock:
            future = self._futures.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._futures[key] = future

        if owner:
            try:
                future.set_result(compute())
            except BaseException as exc:
                future.set_exception(exc)
                raise
        return future.result()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._futures

    def __len__(self) -> int:
        with self._lock:
            return len(self._futures)

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from deps_size_analyzer.cache import SingleFlightCache


def test_value_is_computed_once() -> None:
    cache: SingleFlightCache[str, int] = SingleFlightCache()
    calls: list[str] = []

    def compute() -> int:
        calls.append("x")
        return 42

    assert cache.get_or_compute("k", compute) == 42
    assert cache.get_or_compute("k", compute) == 42
    assert calls == ["x"]
    assert "k" in cache
    assert len(cache) == 1


def test_failure_is_shared() -> None:
    cache: SingleFlightCache[str, int] = SingleFlightCache()

    def boom() -> int:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        cache.get_or_compute("k", boom)
    with pytest.raises(RuntimeError):
        cache.get_or_compute("k", lambda: 1)


def test_concurrent_callers_share_one_computation() -> None:
    cache: SingleFlightCache[str, int] = SingleFlightCache()
    started = threading.Event()
    release = threading.Event()
    calls: list[int] = []

    def slow() -> int:
        calls.append(1)
        started.set()
        release.wait(timeout=5)
        return 7

    with ThreadPoolExecutor(max_workers=4) as executor:
        first = executor.submit(cache.get_or_compute, "k", slow)
        started.wait(timeout=5)
        others = [executor.submit(cache.get_or_compute, "k", slow) for _ in range(3)]
        release.set()

    assert first.result() == 7
    assert [f.result() for f in others] == [7, 7, 7]
    assert calls == [1]

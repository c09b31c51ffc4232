"""Tests for the cache gate."""

import threading
import time
from datetime import timedelta

import pytest

from mileview.cache import OverviewCache
from mileview.errors import TransportError


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class CountingRefresh:
    def __init__(self, delay=0.0):
        self.calls = 0
        self.delay = delay
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            self.calls += 1
            n = self.calls
        if self.delay:
            time.sleep(self.delay)
        return f"page {n}".encode("utf-8")


def test_starts_empty_and_stale():
    cache = OverviewCache(timedelta(hours=1), CountingRefresh())
    assert cache.data == b""
    assert cache.updated is None
    assert cache.is_stale()


def test_freshness_window():
    clock = FakeClock()
    refresh = CountingRefresh()
    cache = OverviewCache(timedelta(seconds=60), refresh, clock=clock)

    first = cache.get()
    assert refresh.calls == 1

    clock.advance(59)
    assert cache.get() == first
    assert refresh.calls == 1

    clock.advance(1)
    second = cache.get()
    assert refresh.calls == 2
    assert second != first

    assert cache.get() == second
    assert refresh.calls == 2


def test_zero_lifetime_refreshes_every_time():
    refresh = CountingRefresh()
    cache = OverviewCache(timedelta(0), refresh, clock=FakeClock())
    cache.get()
    cache.get()
    assert refresh.calls == 2


def test_failed_refresh_keeps_previous_state():
    clock = FakeClock()
    pages = iter([b"good"])

    def refresh():
        try:
            return next(pages)
        except StopIteration:
            raise TransportError("api down")

    cache = OverviewCache(timedelta(seconds=10), refresh, clock=clock)
    assert cache.get() == b"good"
    updated = cache.updated

    clock.advance(10)
    with pytest.raises(TransportError):
        cache.get()
    assert cache.data == b"good"
    assert cache.updated == updated


def test_concurrent_requests_share_one_refresh():
    refresh = CountingRefresh(delay=0.2)
    cache = OverviewCache(timedelta(hours=1), refresh)
    n = 16
    barrier = threading.Barrier(n)
    results = []
    results_lock = threading.Lock()

    def worker():
        barrier.wait()
        page = cache.get()
        with results_lock:
            results.append(page)

    threads = [threading.Thread(target=worker) for _ in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert refresh.calls == 1
    assert len(results) == n
    assert set(results) == {b"page 1"}

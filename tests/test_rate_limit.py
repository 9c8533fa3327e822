"""
Tests for the sliding-window rate limiter.
"""
import pytest
import threading
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from rate_limit import RateLimiter


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class TestRateLimiter:

    def test_allows_up_to_limit(self):
        limiter = RateLimiter(max_attempts=3, window_seconds=60, clock=FakeClock())
        assert [limiter.record_attempt('ip') for _ in range(4)] == [True, True, True, False]

    def test_keys_are_independent(self):
        limiter = RateLimiter(max_attempts=1, window_seconds=60, clock=FakeClock())
        assert limiter.record_attempt('a')
        assert limiter.record_attempt('b')
        assert not limiter.record_attempt('a')

    def test_window_expiry(self):
        clock = FakeClock()
        limiter = RateLimiter(max_attempts=2, window_seconds=60, clock=clock)
        limiter.record_attempt('ip')
        limiter.record_attempt('ip')
        assert not limiter.record_attempt('ip')
        clock.now += 61
        assert limiter.record_attempt('ip')

    def test_rejected_attempts_not_counted(self):
        clock = FakeClock()
        limiter = RateLimiter(max_attempts=1, window_seconds=10, clock=clock)
        limiter.record_attempt('ip')
        clock.now += 5
        assert not limiter.record_attempt('ip')
        clock.now += 6
        assert limiter.record_attempt('ip')

    def test_remaining(self):
        limiter = RateLimiter(max_attempts=3, window_seconds=60, clock=FakeClock())
        assert limiter.remaining('ip') == 3
        limiter.record_attempt('ip')
        assert limiter.remaining('ip') == 2

    def test_evicts_least_recent_key(self):
        limiter = RateLimiter(max_attempts=1, window_seconds=60, max_keys=2, clock=FakeClock())
        limiter.record_attempt('a')
        limiter.record_attempt('b')
        limiter.record_attempt('c')
        assert len(limiter) == 2
        # 'a' was evicted, so it starts fresh
        assert limiter.record_attempt('a')

    def test_reset(self):
        limiter = RateLimiter(max_attempts=1, window_seconds=60, clock=FakeClock())
        limiter.record_attempt('a')
        limiter.record_attempt('b')
        limiter.reset('a')
        assert limiter.record_attempt('a')
        limiter.reset()
        assert len(limiter) == 0

    def test_concurrent_attempts_respect_limit(self):
        limiter = RateLimiter(max_attempts=50, window_seconds=60)
        allowed = []
        start = threading.Barrier(8)

        def worker():
            start.wait()
            for _ in range(25):
                if limiter.record_attempt("10.0.0.1"):
                    allowed.append(1)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(allowed) == 50
        assert limiter.remaining("10.0.0.1") == 0

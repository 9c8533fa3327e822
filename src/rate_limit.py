"""
Sliding-window rate limiting keyed by client identifier.
"""
import threading
import time
from collections import OrderedDict


class RateLimiter:
    def __init__(self, max_attempts=30, window_seconds=3600, max_keys=10000, clock=time.time):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.max_keys = max_keys
        self.clock = clock
        self._attempts = OrderedDict()  # key -> [timestamp, ...], least recently used first
        self._lock = threading.Lock()

    def _recent(self, key, now):
        cutoff = now - self.window_seconds
        return [ts for ts in self._attempts.get(key, []) if ts > cutoff]

    def record_attempt(self, key) -> bool:
        """Record an attempt for key.

        Returns:
            True if the attempt is allowed, False if the limit is exceeded.
            Rejected attempts are not recorded.
        """
        with self._lock:
            now = self.clock()
            recent = self._recent(key, now)

            if len(recent) >= self.max_attempts:
                self._attempts[key] = recent
                self._attempts.move_to_end(key)
                return False

            recent.append(now)
            self._attempts[key] = recent
            self._attempts.move_to_end(key)

            while len(self._attempts) > self.max_keys:
                self._attempts.popitem(last=False)

            return True

    def remaining(self, key) -> int:
        with self._lock:
            return max(0, self.max_attempts - len(self._recent(key, self.clock())))

    def reset(self, key=None):
        with self._lock:
            if key is None:
                self._attempts.clear()
            else:
                self._attempts.pop(key, None)

    def __len__(self):
        with self._lock:
            return len(self._attempts)

    def __repr__(self):
        return (f"RateLimiter(max_attempts={self.max_attempts}, window_seconds={self.window_seconds}, "
                f"keys={len(self._attempts)})")

"""Score submission quotas.

Each client address may submit `burst` scores at once, then `rate` per second.
"""

from __future__ import annotations

import time


class TokenBucket:
    """Refillable allowance of submissions; `clock` is injectable for tests."""

    def __init__(self, rate_per_sec: float, burst: float, clock=time.perf_counter):
        self.rate = float(rate_per_sec)
        self.capacity = float(burst)
        self.tokens = float(burst)
        self._clock = clock
        self.last = clock()

    def allow(self, cost: float = 1.0) -> bool:
        now = self._clock()
        dt = now - self.last
        self.last = now
        self.tokens = min(self.capacity, self.tokens + dt * self.rate)
        if self.tokens >= cost:
            self.tokens -= cost
            return True
        return False


class ClientQuotas:
    """One bucket per client key (remote address)."""

    def __init__(self, rate_per_sec: float, burst: float, max_clients: int = 4096, clock=time.perf_counter):
        self.rate = rate_per_sec
        self.burst = burst
        self.max_clients = max_clients
        self._clock = clock
        self._buckets: dict[str, TokenBucket] = {}

    def allow(self, client: str) -> bool:
        bucket = self._buckets.get(client)
        if bucket is None:
            if len(self._buckets) >= self.max_clients:
                # Drop the oldest client; dicts keep insertion order.
                self._buckets.pop(next(iter(self._buckets)))
            bucket = TokenBucket(self.rate, self.burst, clock=self._clock)
            self._buckets[client] = bucket
        return bucket.allow()

"""Tests for per-client submission quotas."""

from ranking_server.net.rate_limit import ClientQuotas, TokenBucket


class FakeClock:
    def __init__(self):
        self.t = 0.0

    def __call__(self) -> float:
        return self.t


def test_bucket_refills_over_time():
    clock = FakeClock()
    bucket = TokenBucket(rate_per_sec=1.0, burst=2.0, clock=clock)
    assert bucket.allow()
    assert bucket.allow()
    assert not bucket.allow()
    clock.t += 1.0
    assert bucket.allow()
    assert not bucket.allow()


def test_quotas_are_per_client():
    clock = FakeClock()
    quotas = ClientQuotas(rate_per_sec=0.0, burst=1.0, clock=clock)
    assert quotas.allow("10.0.0.1")
    assert not quotas.allow("10.0.0.1")
    assert quotas.allow("10.0.0.2")


def test_quotas_forget_oldest_client_when_full():
    quotas = ClientQuotas(rate_per_sec=0.0, burst=1.0, max_clients=2, clock=FakeClock())
    assert quotas.allow("a")
    assert quotas.allow("b")
    assert quotas.allow("c")
    # "a" was evicted and starts with a fresh bucket.
    assert quotas.allow("a")

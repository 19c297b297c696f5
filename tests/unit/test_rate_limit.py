"""Unit tests for the fixed-window rate limit store."""

from fluentpath.api.middleware.rate_limit import InMemoryRateLimitStore


class FakeMonotonic:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestInMemoryRateLimitStore:
    def test_allows_up_to_limit(self):
        store = InMemoryRateLimitStore(clock=FakeMonotonic())
        results = [store.check_and_incr("api", "learner-1", 3, 60) for _ in range(4)]
        assert results == [True, True, True, False]

    def test_window_resets(self):
        clock = FakeMonotonic()
        store = InMemoryRateLimitStore(clock=clock)
        for _ in range(2):
            store.check_and_incr("ai", "learner-1", 2, 3600)
        assert store.check_and_incr("ai", "learner-1", 2, 3600) is False
        clock.now += 3600
        assert store.check_and_incr("ai", "learner-1", 2, 3600) is True

    def test_scopes_and_identifiers_are_independent(self):
        store = InMemoryRateLimitStore(clock=FakeMonotonic())
        assert store.check_and_incr("api", "a", 1, 60)
        assert store.check_and_incr("api", "b", 1, 60)
        assert store.check_and_incr("ai", "a", 1, 60)
        assert not store.check_and_incr("api", "a", 1, 60)

    def test_cleanup_drops_expired_windows(self):
        clock = FakeMonotonic()
        store = InMemoryRateLimitStore(clock=clock)
        store.check_and_incr("api", "a", 1, 60)
        clock.now += 61
        store.cleanup_old()
        assert store.check_and_incr("api", "a", 1, 60) is True

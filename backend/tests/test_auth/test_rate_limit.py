"""Tests for the login rate limiter."""

from mahjong_ledger.middleware.rate_limit import RATE_LIMITS, InMemoryRateLimiter


class TestInMemoryRateLimiter:

    def test_allows_up_to_limit_then_blocks(self):
        limiter = InMemoryRateLimiter()
        limit = RATE_LIMITS["admin_login"].max_requests
        results = [limiter.hit("1.2.3.4", "admin_login", now=1000.0) for _ in range(limit)]
        assert all(not limited for limited, _ in results)

        limited, retry_after = limiter.hit("1.2.3.4", "admin_login", now=1001.0)
        assert limited
        assert retry_after == 15 * 60

    def test_keys_are_independent(self):
        limiter = InMemoryRateLimiter()
        for _ in range(RATE_LIMITS["admin_login"].max_requests):
            limiter.hit("1.2.3.4", "admin_login", now=1000.0)
        limited, _ = limiter.hit("5.6.7.8", "admin_login", now=1000.0)
        assert not limited

    def test_window_slides(self):
        limiter = InMemoryRateLimiter()
        for _ in range(RATE_LIMITS["admin_login"].max_requests):
            limiter.hit("1.2.3.4", "admin_login", now=1000.0)
        window = RATE_LIMITS["admin_login"].window_seconds
        limited, _ = limiter.hit("1.2.3.4", "admin_login", now=1000.0 + window + 1)
        assert not limited

    def test_reset(self):
        limiter = InMemoryRateLimiter()
        for _ in range(RATE_LIMITS["admin_login"].max_requests):
            limiter.hit("1.2.3.4", "admin_login", now=1000.0)
        limiter.reset()
        limited, _ = limiter.hit("1.2.3.4", "admin_login", now=1000.0)
        assert not limited

"""
Unit tests for the dual fixed-window RateLimiter.

Verifies:
  - remaining counts track recorded usage and clamp at 0
  - request window blocks first, token window second
  - BYOK callers get 5x both quotas
  - expired windows restart instead of accumulating
  - clients never affect each other
  - stale entries are evicted lazily on check

Time is driven by FakeClock; nothing sleeps.
"""

from devflow_api.core.rate_limit import BYOK_MULTIPLIER, ONE_DAY_S, ONE_MINUTE_S, RateLimiter

from conftest import FakeClock

IP = "1.2.3.4"


def make_limiter(rpm: int = 3, tokens: int = 1000, clock=None) -> RateLimiter:
    return RateLimiter(requests_per_minute=rpm, tokens_per_day=tokens, clock=clock or FakeClock())


class TestCheckLimit:
    def test_fresh_client_is_allowed_with_full_quota(self):
        decision = make_limiter().check_limit(IP, False)
        assert decision.allowed is True
        assert decision.remaining_requests == 3
        assert decision.remaining_tokens == 1000
        assert decision.retry_after_ms is None

    def test_remaining_requests_tracks_count(self):
        limiter = make_limiter(rpm=5)
        for recorded in range(1, 6):
            limiter.record_request(IP)
            assert limiter.check_limit(IP, False).remaining_requests == 5 - recorded

    def test_check_does_not_mutate_counters(self):
        limiter = make_limiter()
        for _ in range(10):
            limiter.check_limit(IP, False)
        assert limiter.check_limit(IP, False).remaining_requests == 3

    def test_request_quota_exhausted_blocks(self):
        limiter = make_limiter(rpm=3, tokens=1000)
        for _ in range(3):
            limiter.record_request(IP)

        decision = limiter.check_limit(IP, False)
        assert decision.allowed is False
        assert decision.remaining_requests == 0
        assert decision.retry_after_ms > 0

    def test_request_block_reports_remaining_tokens(self):
        limiter = make_limiter(rpm=1, tokens=1000)
        limiter.record_request(IP)
        limiter.record_tokens(IP, 250)

        decision = limiter.check_limit(IP, False)
        assert decision.allowed is False
        assert decision.remaining_tokens == 750

    def test_retry_after_is_time_left_in_minute_window(self):
        clock = FakeClock()
        limiter = make_limiter(rpm=1, clock=clock)
        limiter.record_request(IP)
        clock.advance(20)

        decision = limiter.check_limit(IP, False)
        assert decision.retry_after_ms == 40_000
        assert decision.retry_after_s == 40

    def test_token_quota_exceeded_blocks(self):
        limiter = make_limiter(rpm=3, tokens=1000)
        limiter.record_tokens(IP, 1001)

        decision = limiter.check_limit(IP, False)
        assert decision.allowed is False
        assert decision.remaining_tokens == 0
        assert decision.remaining_requests == 3

    def test_token_block_retry_after_is_time_left_in_day(self):
        clock = FakeClock()
        limiter = make_limiter(tokens=100, clock=clock)
        limiter.record_tokens(IP, 100)
        clock.advance(3_600)

        decision = limiter.check_limit(IP, False)
        assert decision.retry_after_ms == int((ONE_DAY_S - 3_600) * 1000)

    def test_remaining_tokens_clamped_at_zero(self):
        limiter = make_limiter(tokens=1000)
        limiter.record_tokens(IP, 5000)
        assert limiter.check_limit(IP, False).remaining_tokens == 0


class TestByokMultiplier:
    def test_privileged_quota_is_five_times_base(self):
        limiter = make_limiter(rpm=3, tokens=1000)
        decision = limiter.check_limit(IP, True)
        assert decision.remaining_requests == 3 * BYOK_MULTIPLIER
        assert decision.remaining_tokens == 1000 * BYOK_MULTIPLIER

    def test_privileged_remaining_tracks_count(self):
        limiter = make_limiter(rpm=3)
        for _ in range(7):
            limiter.record_request(IP)
        assert limiter.check_limit(IP, True).remaining_requests == 15 - 7

    def test_privileged_caller_passes_where_base_caller_is_blocked(self):
        limiter = make_limiter(rpm=3)
        for _ in range(3):
            limiter.record_request(IP)
        assert limiter.check_limit(IP, False).allowed is False
        assert limiter.check_limit(IP, True).allowed is True


class TestFixedWindows:
    def test_expired_minute_window_restarts_at_one(self):
        clock = FakeClock()
        limiter = make_limiter(rpm=3, clock=clock)
        for _ in range(3):
            limiter.record_request(IP)

        clock.advance(ONE_MINUTE_S)
        limiter.record_request(IP)

        decision = limiter.check_limit(IP, False)
        assert decision.allowed is True
        assert decision.remaining_requests == 2

    def test_expired_window_reports_full_quota_before_next_record(self):
        clock = FakeClock()
        limiter = make_limiter(rpm=3, clock=clock)
        for _ in range(3):
            limiter.record_request(IP)
        clock.advance(ONE_MINUTE_S + 1)
        assert limiter.check_limit(IP, False).remaining_requests == 3

    def test_expired_day_window_restarts_at_new_amount(self):
        clock = FakeClock()
        limiter = make_limiter(tokens=1000, clock=clock)
        limiter.record_tokens(IP, 900)
        clock.advance(ONE_DAY_S)
        limiter.record_tokens(IP, 200)
        assert limiter.check_limit(IP, False).remaining_tokens == 800

    def test_tokens_accumulate_within_window(self):
        clock = FakeClock()
        limiter = make_limiter(tokens=1000, clock=clock)
        limiter.record_tokens(IP, 300)
        clock.advance(ONE_DAY_S / 2)
        limiter.record_tokens(IP, 300)
        assert limiter.check_limit(IP, False).remaining_tokens == 400


class TestIsolationAndCleanup:
    def test_clients_are_independent(self):
        limiter = make_limiter(rpm=3, tokens=1000)
        for _ in range(3):
            limiter.record_request("10.0.0.1")
        limiter.record_tokens("10.0.0.1", 5000)

        other = limiter.check_limit("10.0.0.2", False)
        assert other.allowed is True
        assert other.remaining_requests == 3
        assert other.remaining_tokens == 1000

    def test_stale_entries_evicted_on_check(self):
        clock = FakeClock()
        limiter = make_limiter(clock=clock)
        limiter.record_request("10.0.0.1")
        assert limiter.tracked_clients() == 1

        clock.advance(ONE_MINUTE_S * 2)
        limiter.check_limit("10.0.0.2", False)
        assert limiter.tracked_clients() == 0

    def test_entries_within_twice_window_are_kept(self):
        clock = FakeClock()
        limiter = make_limiter(clock=clock)
        limiter.record_request("10.0.0.1")
        clock.advance(ONE_MINUTE_S * 1.5)
        limiter.check_limit("10.0.0.2", False)
        assert limiter.tracked_clients() == 1

    def test_token_entry_outlives_request_entry(self):
        clock = FakeClock()
        limiter = make_limiter(clock=clock)
        limiter.record_request(IP)
        limiter.record_tokens(IP, 10)

        clock.advance(ONE_MINUTE_S * 3)
        limiter.check_limit("other", False)
        assert limiter.tracked_clients() == 1
        assert limiter.check_limit(IP, False).remaining_tokens == 990

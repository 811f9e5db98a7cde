"""
rate_limit.py: In-process, per-client admission control for AI routes.

Two independent fixed-window buckets per client identifier (the IP):

  requests:  count per 1-minute window   (RATE_LIMIT_RPM)
  tokens:    total per 1-day window      (RATE_LIMIT_DAILY_TOKENS)

BYOK callers pay for their own provider calls, so both quotas are
multiplied by BYOK_MULTIPLIER for them.

check_limit() never mutates counters; the route records usage after the
provider call has returned. Between those two points the request is
suspended on network I/O, so a burst from one client can over-admit
slightly. That is accepted: this is abuse protection, not billing.

All methods are synchronous and the app runs on a single event loop, so
the dict read-modify-writes below need no locks. Do not call them from a
threadpool (i.e. keep the FastAPI dependencies that touch the limiter
`async def`).

Stale entries are evicted lazily on each check once 2x their window has
passed, which bounds memory without a background task.

One instance is built by create_app() and reached through the
get_rate_limiter dependency; tests construct their own.
"""

import math
import time
from dataclasses import dataclass
from typing import Callable, Optional

ONE_MINUTE_S = 60.0
ONE_DAY_S = 86_400.0

BYOK_MULTIPLIER = 5


@dataclass
class RateLimitEntry:
    count: int
    window_start: float


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining_requests: int
    remaining_tokens: int
    # Time until the blocking window resets; None when allowed.
    retry_after_ms: Optional[int] = None

    @property
    def retry_after_s(self) -> int:
        """Retry-After header value (whole seconds, rounded up)."""
        ms = self.retry_after_ms if self.retry_after_ms is not None else int(ONE_MINUTE_S * 1000)
        return math.ceil(ms / 1000)


class RateLimiter:
    """
    Dual fixed-window limiter keyed by client identifier.

    Args:
        requests_per_minute: base request quota per minute.
        tokens_per_day:      base token quota per day.
        byok_multiplier:     quota multiplier for privileged (BYOK) callers.
        clock:               seconds source; injectable for tests.
    """

    def __init__(
        self,
        requests_per_minute: int = 10,
        tokens_per_day: int = 500_000,
        byok_multiplier: int = BYOK_MULTIPLIER,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.requests_per_minute = requests_per_minute
        self.tokens_per_day = tokens_per_day
        self.byok_multiplier = byok_multiplier
        self._clock = clock
        self._request_windows: dict[str, RateLimitEntry] = {}
        self._token_windows: dict[str, RateLimitEntry] = {}

    # ── Admission ─────────────────────────────────────────────────────────────

    def check_limit(self, client_id: str, is_privileged: bool = False) -> RateLimitDecision:
        now = self._clock()
        multiplier = self.byok_multiplier if is_privileged else 1
        rpm = self.requests_per_minute * multiplier
        daily_tokens = self.tokens_per_day * multiplier

        self._evict_stale(now)

        entry = self._request_windows.get(client_id)
        if entry and now - entry.window_start < ONE_MINUTE_S and entry.count >= rpm:
            return RateLimitDecision(
                allowed=False,
                remaining_requests=0,
                remaining_tokens=self._remaining(self._token_windows, client_id, daily_tokens, ONE_DAY_S, now),
                retry_after_ms=_ms_left(entry, ONE_MINUTE_S, now),
            )

        entry = self._token_windows.get(client_id)
        if entry and now - entry.window_start < ONE_DAY_S and entry.count >= daily_tokens:
            return RateLimitDecision(
                allowed=False,
                remaining_requests=self._remaining(self._request_windows, client_id, rpm, ONE_MINUTE_S, now),
                remaining_tokens=0,
                retry_after_ms=_ms_left(entry, ONE_DAY_S, now),
            )

        return RateLimitDecision(
            allowed=True,
            remaining_requests=self._remaining(self._request_windows, client_id, rpm, ONE_MINUTE_S, now),
            remaining_tokens=self._remaining(self._token_windows, client_id, daily_tokens, ONE_DAY_S, now),
        )

    # ── Recording ─────────────────────────────────────────────────────────────

    def record_request(self, client_id: str) -> None:
        self._accumulate(self._request_windows, client_id, 1, ONE_MINUTE_S)

    def record_tokens(self, client_id: str, tokens: int) -> None:
        self._accumulate(self._token_windows, client_id, tokens, ONE_DAY_S)

    def _accumulate(self, windows: dict[str, RateLimitEntry], client_id: str, amount: int, window_s: float) -> None:
        now = self._clock()
        entry = windows.get(client_id)
        if entry is None or now - entry.window_start >= window_s:
            # Expired windows restart at the new amount instead of adding to it
            windows[client_id] = RateLimitEntry(count=amount, window_start=now)
        else:
            entry.count += amount

    # ── Internals ─────────────────────────────────────────────────────────────

    @staticmethod
    def _remaining(
        windows: dict[str, RateLimitEntry],
        client_id: str,
        limit: int,
        window_s: float,
        now: float,
    ) -> int:
        entry = windows.get(client_id)
        if entry is None or now - entry.window_start >= window_s:
            return limit
        return max(0, limit - entry.count)

    def _evict_stale(self, now: float) -> None:
        for windows, window_s in (
            (self._request_windows, ONE_MINUTE_S),
            (self._token_windows, ONE_DAY_S),
        ):
            stale = [key for key, entry in windows.items() if now - entry.window_start >= window_s * 2]
            for key in stale:
                del windows[key]

    def tracked_clients(self) -> int:
        """Number of distinct clients currently holding any window."""
        return len(self._request_windows.keys() | self._token_windows.keys())


def _ms_left(entry: RateLimitEntry, window_s: float, now: float) -> int:
    return max(1, math.ceil((window_s - (now - entry.window_start)) * 1000))

"""Sliding-window rate limiting keyed by an opaque identifier."""

import time
from collections import deque
from collections.abc import Callable

from purrpal.entities import RateLimitResult
from purrpal.logging_config import get_logger

logger = get_logger(__name__)

ANONYMOUS_IDENTIFIER = "anonymous"


class SlidingWindowRateLimiter:
    """Per-identifier sliding window of request timestamps.

    Rejected attempts are not recorded, so they do not consume quota.
    A missing identifier shares the ``"anonymous"`` bucket. Identifiers idle
    for a whole window are swept at most once per window.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._max_requests = max_requests
        self._window = window_seconds
        self._clock = clock
        self._windows: dict[str, deque[float]] = {}
        self._last_sweep = clock()

    def check(self, identifier: str | None) -> RateLimitResult:
        """Admit or reject one request for ``identifier``.

        Returns:
            RateLimitResult with remaining quota and reset time
        """
        key = identifier or ANONYMOUS_IDENTIFIER
        now = self._clock()

        if now - self._last_sweep >= self._window:
            removed = self.cleanup_expired()
            logger.debug(f"Swept {removed} idle rate-limit windows")

        window = self._windows.setdefault(key, deque())

        while window and window[0] <= now - self._window:
            window.popleft()

        if len(window) >= self._max_requests:
            logger.warning(
                f"Rate limit exceeded for {key} ({len(window)}/{self._max_requests} "
                f"in {self._window:.0f}s)"
            )
            return RateLimitResult(
                allowed=False,
                remaining=0,
                reset_time=window[0] + self._window,
            )

        window.append(now)
        return RateLimitResult(
            allowed=True,
            remaining=self._max_requests - len(window),
            reset_time=now + self._window,
        )

    def cleanup_expired(self) -> int:
        """Drop every identifier whose newest request has left the window.

        Returns:
            Number of identifiers removed
        """
        now = self._clock()
        cutoff = now - self._window
        idle = [key for key, window in self._windows.items() if not window or window[-1] <= cutoff]
        for key in idle:
            del self._windows[key]
        self._last_sweep = now
        return len(idle)

    def reset(self, identifier: str | None = None) -> None:
        """Forget the window of one identifier, or of all when None."""
        if identifier is None:
            self._windows.clear()
        else:
            self._windows.pop(identifier, None)

    @property
    def max_requests(self) -> int:
        return self._max_requests

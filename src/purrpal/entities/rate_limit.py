"""Rate limit decision entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a rate limit check.

    Attributes:
        allowed: Whether the request was admitted
        remaining: Requests left in the current window
        reset_time: Clock time (seconds) at which quota frees up
    """

    allowed: bool
    remaining: int
    reset_time: float

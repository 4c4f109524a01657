"""Process-wide request metrics."""

from dataclasses import replace

from purrpal.entities import MetricsSnapshot, UrgencyLevel


class MetricsCollector:
    """Counters and running average updated once per completed request.

    When disabled, record() does nothing and snapshot() keeps returning the
    last state.
    """

    def __init__(self, enabled: bool = True) -> None:
        self._enabled = enabled
        self._metrics = MetricsSnapshot()

    def record(
        self,
        success: bool,
        response_time_ms: float,
        cache_hit: bool = False,
        urgency_level: UrgencyLevel | None = None,
    ) -> None:
        """Record one completed request.

        The average covers successful requests only and is updated
        incrementally: ``(old_avg * (n - 1) + response_time_ms) / n``.
        """
        if not self._enabled:
            return

        m = self._metrics
        successful = m.successful_requests
        average = m.average_response_time

        if success:
            successful += 1
            average = (average * (successful - 1) + response_time_ms) / successful

        self._metrics = replace(
            m,
            total_requests=m.total_requests + 1,
            successful_requests=successful,
            failed_requests=m.failed_requests + (0 if success else 1),
            cache_hits=m.cache_hits + (1 if cache_hit else 0),
            cache_misses=m.cache_misses + (0 if cache_hit else 1),
            average_response_time=average,
            emergency_detections=m.emergency_detections
            + (1 if urgency_level == UrgencyLevel.EMERGENCY else 0),
            serious_condition_detections=m.serious_condition_detections
            + (1 if urgency_level == UrgencyLevel.SERIOUS else 0),
        )

    def snapshot(self) -> MetricsSnapshot:
        """Return the current metrics (immutable)."""
        return self._metrics

    def reset(self) -> None:
        """Zero every counter."""
        self._metrics = MetricsSnapshot()

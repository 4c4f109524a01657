"""Metrics snapshot entity."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class MetricsSnapshot:
    """Point-in-time copy of the process-wide request metrics."""

    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    average_response_time: float = 0.0
    emergency_detections: int = 0
    serious_condition_detections: int = 0

    def to_dict(self) -> dict[str, float | int]:
        """Convert snapshot to dictionary."""
        return asdict(self)

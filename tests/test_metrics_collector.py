"""
Tests for request metrics.
"""

import pytest

from purrpal.entities import UrgencyLevel
from purrpal.services import MetricsCollector


def test_average_covers_successful_requests():
    metrics = MetricsCollector()
    for ms in (1000, 2000, 3000):
        metrics.record(True, ms)
    metrics.record(False, 99999)

    snapshot = metrics.snapshot()
    assert snapshot.average_response_time == pytest.approx(2000)
    assert snapshot.total_requests == 4
    assert snapshot.successful_requests == 3
    assert snapshot.failed_requests == 1


def test_cache_and_urgency_counters():
    metrics = MetricsCollector()
    metrics.record(True, 10, cache_hit=True, urgency_level=UrgencyLevel.NORMAL)
    metrics.record(True, 10, cache_hit=False, urgency_level=UrgencyLevel.EMERGENCY)
    metrics.record(False, 10, urgency_level=UrgencyLevel.SERIOUS)
    metrics.record(False, 10)

    snapshot = metrics.snapshot()
    assert snapshot.cache_hits == 1
    assert snapshot.cache_misses == 3
    assert snapshot.emergency_detections == 1
    assert snapshot.serious_condition_detections == 1
    assert snapshot.total_requests == snapshot.successful_requests + snapshot.failed_requests


def test_disabled_collector_ignores_records():
    metrics = MetricsCollector(enabled=False)
    metrics.record(True, 100)
    assert metrics.snapshot().total_requests == 0


def test_reset():
    metrics = MetricsCollector()
    metrics.record(True, 100, cache_hit=True)
    metrics.reset()

    assert metrics.snapshot().to_dict() == {
        "total_requests": 0,
        "successful_requests": 0,
        "failed_requests": 0,
        "cache_hits": 0,
        "cache_misses": 0,
        "average_response_time": 0.0,
        "emergency_detections": 0,
        "serious_condition_detections": 0,
    }

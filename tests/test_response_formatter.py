"""
Tests for success and failure envelopes.
"""

import logging

from purrpal.entities import UrgencyLevel
from purrpal.errors import (
    GENERIC_USER_MESSAGE,
    GenerationTimeoutError,
    ProviderError,
    RateLimitError,
    ValidationError,
)
from purrpal.services import RECOMMENDATIONS, SUGGESTIONS, ResponseFormatter


def test_success_envelope():
    response = ResponseFormatter(source="gemini").success(
        "  Berikan air bersih.  ",
        urgency_level=UrgencyLevel.NORMAL,
        cached=False,
        response_time_ms=12.5,
        session_id="s1",
    )

    assert response.success is True
    assert response.message == "Berikan air bersih."
    assert response.source == "gemini"
    assert response.recommendations is None
    assert response.session_id == "s1"
    assert response.timestamp


def test_recommendations_by_urgency():
    formatter = ResponseFormatter()
    emergency = formatter.success("x", urgency_level=UrgencyLevel.EMERGENCY)
    serious = formatter.success("x", urgency_level=UrgencyLevel.SERIOUS)

    assert emergency.recommendations == RECOMMENDATIONS[UrgencyLevel.EMERGENCY]
    assert len(emergency.recommendations) == 3
    assert serious.recommendations == RECOMMENDATIONS[UrgencyLevel.SERIOUS]
    assert len(serious.recommendations) == 3


def test_failure_hides_internal_detail(caplog):
    formatter = ResponseFormatter()

    with caplog.at_level(logging.ERROR):
        response = formatter.failure(RuntimeError("db password=hunter2"), session_id="s1")

    assert response.success is False
    assert response.error_code == "INTERNAL_ERROR"
    assert response.message == GENERIC_USER_MESSAGE
    assert "hunter2" not in response.model_dump_json()
    assert response.suggestions == SUGGESTIONS
    assert response.session_id == "s1"
    assert response.error_id in caplog.text
    assert "hunter2" in caplog.text


def test_failure_error_ids_are_unique():
    formatter = ResponseFormatter()
    first = formatter.failure(GenerationTimeoutError("slow"))
    second = formatter.failure(GenerationTimeoutError("slow"))

    assert first.error_id != second.error_id
    assert first.error_code == "GENERATION_TIMEOUT"
    assert first.recoverable is True


def test_failure_carries_validation_errors():
    response = ResponseFormatter().failure(ValidationError(["input too short"]))

    assert response.error_code == "VALIDATION_FAILED"
    assert response.errors == ["input too short"]
    assert response.reset_time is None


def test_failure_carries_reset_time():
    response = ResponseFormatter().failure(RateLimitError(1_700_000_900.0), streaming=True)

    assert response.error_code == "RATE_LIMITED"
    assert response.reset_time == 1_700_000_900.0
    assert response.streaming is True
    assert response.errors is None


def test_provider_error_message_is_user_safe():
    error = ProviderError("gemini API returned HTTP 401", category="auth", status_code=401)
    response = ResponseFormatter().failure(error)

    assert response.error_code == "PROVIDER_ERROR"
    assert "401" not in response.message

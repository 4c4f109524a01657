"""Response DTOs (envelopes) returned by the chatbot and the API."""

from typing import Literal

from pydantic import BaseModel, Field

from purrpal.entities import UrgencyLevel


class ChatResponse(BaseModel):
    """Success envelope for a generated answer."""

    success: Literal[True] = True
    message: str = Field(..., description="The answer text, trimmed")
    timestamp: str = Field(..., description="ISO-8601 time the answer was produced")
    source: str = Field(..., description="Tag of the generation provider")
    urgency_level: UrgencyLevel | None = Field(None, description="Urgency classification")
    cached: bool | None = Field(None, description="Whether the answer came from the cache")
    response_time_ms: float | None = Field(None, description="End-to-end handling time", ge=0.0)
    recommendations: list[str] | None = Field(
        None,
        description="Fixed next-step directives for serious and emergency cases",
    )
    session_id: str | None = Field(None, description="Session the request belonged to")
    streaming: bool | None = Field(None, description="Set on streamed answers")


class ErrorResponse(BaseModel):
    """Failure envelope. Never carries internal error detail."""

    success: Literal[False] = False
    message: str = Field(..., description="Fixed, user-safe description of the failure")
    error_id: str = Field(..., description="Correlation id matching the server log entry")
    error_code: str = Field(..., description="Machine-readable failure category")
    recoverable: bool = Field(..., description="Whether resubmitting may succeed")
    timestamp: str = Field(..., description="ISO-8601 time of the failure")
    suggestions: list[str] = Field(default_factory=list, description="Generic recovery suggestions")
    errors: list[str] | None = Field(None, description="Validation messages, if input was rejected")
    reset_time: float | None = Field(
        None,
        description="Unix time at which rate-limit quota frees up",
    )
    session_id: str | None = Field(None, description="Session the request belonged to")
    streaming: bool | None = Field(None, description="Set on failed streamed requests")


Envelope = ChatResponse | ErrorResponse


class MetricsResponse(BaseModel):
    """Response DTO for the metrics snapshot."""

    total_requests: int = Field(..., ge=0)
    successful_requests: int = Field(..., ge=0)
    failed_requests: int = Field(..., ge=0)
    cache_hits: int = Field(..., ge=0)
    cache_misses: int = Field(..., ge=0)
    average_response_time: float = Field(..., description="Mean latency of successful requests (ms)", ge=0.0)
    emergency_detections: int = Field(..., ge=0)
    serious_condition_detections: int = Field(..., ge=0)
    active_conversations: int = Field(..., description="Sessions with a stored turn", ge=0)
    cache_size: int = Field(..., description="Entries currently held by the cache", ge=0)
    initialized: bool = Field(..., description="Whether the chatbot is ready")
    timestamp: str = Field(..., description="ISO-8601 time of the snapshot")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: Literal["healthy", "not_initialized", "error"] = Field(..., description="Health status")
    message: str = Field(..., description="Human-readable status message")
    model: str | None = Field(None, description="Model used for generation")
    test_response_time_ms: float | None = Field(
        None,
        description="Latency of the live probe generation",
        ge=0.0,
    )
    error_code: str | None = Field(None, description="Failure category when status is not healthy")
    cache_enabled: bool | None = None
    rate_limit_enabled: bool | None = None
    active_conversations: int | None = None
    metrics: dict[str, float | int] = Field(default_factory=dict, description="Metrics snapshot")
    timestamp: str = Field(..., description="ISO-8601 time of the check")


class ConversationTurnResponse(BaseModel):
    """Response DTO for a session's last conversation turn."""

    session_id: str
    last_message: str
    last_response: str
    timestamp: str
    urgency_level: UrgencyLevel

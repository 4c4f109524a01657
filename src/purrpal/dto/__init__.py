"""Data Transfer Objects for API contracts.

These Pydantic models define the external contract: the success and
failure envelopes returned by every chatbot operation, plus the HTTP
request bodies.

Internal domain logic should use entities from the entities package.
"""

from .requests import ChatRequest
from .responses import (
    ChatResponse,
    ConversationTurnResponse,
    Envelope,
    ErrorResponse,
    HealthCheckResponse,
    MetricsResponse,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ConversationTurnResponse",
    "Envelope",
    "ErrorResponse",
    "HealthCheckResponse",
    "MetricsResponse",
]

"""Domain entities for internal representation.

These are plain dataclasses and enums used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.

Entities should have:
- No JSON serialization logic
- No Pydantic validation
- No external dependencies
"""

from .cache_entry import CacheEntryEntity
from .conversation_turn import ConversationTurn
from .metrics import MetricsSnapshot
from .rate_limit import RateLimitResult
from .stream_chunk import StreamChunk
from .urgency import UrgencyLevel
from .validation import ValidationResult

__all__ = [
    "CacheEntryEntity",
    "ConversationTurn",
    "MetricsSnapshot",
    "RateLimitResult",
    "StreamChunk",
    "UrgencyLevel",
    "ValidationResult",
]

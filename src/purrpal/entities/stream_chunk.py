"""Streaming chunk event entity."""

from dataclasses import dataclass

from .urgency import UrgencyLevel


@dataclass(frozen=True)
class StreamChunk:
    """One piece of a streamed response, handed to chunk callbacks.

    Attributes:
        chunk: Text of this chunk
        accumulated_text: All text received so far, this chunk included
        index: 1-based position of the chunk in the stream
        urgency_level: Urgency classification of the request
        session_id: Session the request belongs to, if any
    """

    chunk: str
    accumulated_text: str
    index: int
    urgency_level: UrgencyLevel
    session_id: str | None = None

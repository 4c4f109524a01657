"""Conversation turn domain entity."""

from dataclasses import dataclass
from datetime import datetime

from .urgency import UrgencyLevel


@dataclass(frozen=True)
class ConversationTurn:
    """The most recent exchange of a session.

    Only one turn is kept per session; each request replaces it.

    Attributes:
        last_message: The sanitized user message
        last_response: The generated response text
        timestamp: When the turn was recorded
        urgency_level: Urgency classification of the message
    """

    last_message: str
    last_response: str
    timestamp: datetime
    urgency_level: UrgencyLevel

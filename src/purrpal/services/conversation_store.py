"""
Conversation store for PurrPal.

Keeps the last exchange of each session in memory so a follow-up question
can be answered with the previous reply as context.
"""
import time
from collections.abc import Callable
from datetime import datetime, timezone

from purrpal.entities import ConversationTurn, UrgencyLevel


class ConversationStore:
    """
    Manages per-session conversation state in-memory.

    Handles:
    - Recording the latest turn (replacing the previous one)
    - Retrieval for follow-up prompts
    - Explicit clearing per session or wholesale
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        """Initialize the store with a clock used for turn timestamps."""
        self._turns: dict[str, ConversationTurn] = {}
        self._clock = clock

    def record_turn(
        self,
        session_id: str,
        message: str,
        response: str,
        urgency_level: UrgencyLevel,
    ) -> ConversationTurn:
        """Replace the session's turn with a new one and return it."""
        turn = ConversationTurn(
            last_message=message,
            last_response=response,
            timestamp=datetime.fromtimestamp(self._clock(), tz=timezone.utc),
            urgency_level=urgency_level,
        )
        self._turns[session_id] = turn
        return turn

    def get(self, session_id: str | None) -> ConversationTurn | None:
        """Return the session's last turn, or None."""
        if not session_id:
            return None
        return self._turns.get(session_id)

    def clear(self, session_id: str | None) -> bool:
        """Remove a session's turn. Returns True if one existed."""
        if not session_id:
            return False
        return self._turns.pop(session_id, None) is not None

    def clear_all(self) -> None:
        """Remove every session's turn."""
        self._turns.clear()

    def __len__(self) -> int:
        return len(self._turns)

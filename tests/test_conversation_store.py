"""
Tests for the per-session conversation store.
"""

from datetime import datetime, timezone

from purrpal.entities import UrgencyLevel
from purrpal.services import ConversationStore


def test_record_and_get(clock):
    store = ConversationStore(clock=clock)
    turn = store.record_turn("s1", "Kucing saya bersin", "Pantau selama 2 hari.", UrgencyLevel.NORMAL)

    assert store.get("s1") == turn
    assert turn.timestamp == datetime.fromtimestamp(clock.now, tz=timezone.utc)
    assert len(store) == 1


def test_record_replaces_previous_turn(clock):
    store = ConversationStore(clock=clock)
    store.record_turn("s1", "pertama", "jawaban pertama", UrgencyLevel.NORMAL)
    clock.advance(5)
    store.record_turn("s1", "kedua", "jawaban kedua", UrgencyLevel.SERIOUS)

    turn = store.get("s1")
    assert turn.last_message == "kedua"
    assert turn.last_response == "jawaban kedua"
    assert turn.urgency_level == UrgencyLevel.SERIOUS
    assert len(store) == 1


def test_missing_session(clock):
    store = ConversationStore(clock=clock)
    assert store.get("nope") is None
    assert store.get(None) is None
    assert store.clear(None) is False


def test_clear(clock):
    store = ConversationStore(clock=clock)
    store.record_turn("s1", "a", "b", UrgencyLevel.NORMAL)
    store.record_turn("s2", "a", "b", UrgencyLevel.NORMAL)

    assert store.clear("s1") is True
    assert store.clear("s1") is False
    assert store.get("s2") is not None

    store.clear_all()
    assert len(store) == 0

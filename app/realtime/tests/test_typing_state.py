"""
Tests for the typing-state tracker.

Expiry is tested with an injected clock (FakeClock from conftest), never
by sleeping.
"""

from realtime.tests.fakes import FakeClock
from realtime.typing_state import TypingTracker


# =============================================================================
# TestSetClear
# =============================================================================


class TestSetClear:
    """Tests for set_typing(), clear_typing() and clear_all_for()."""

    def test_set_typing_starts_indicator(self):
        typing = TypingTracker()

        assert typing.set_typing("chat-1", "alice") is True
        assert typing.is_typing("chat-1", "alice") is True
        assert typing.typing_in("chat-1") == {"alice"}

    def test_repeated_set_typing_is_a_refresh(self):
        typing = TypingTracker()
        typing.set_typing("chat-1", "alice")

        assert typing.set_typing("chat-1", "alice") is False

    def test_clear_typing(self):
        typing = TypingTracker()
        typing.set_typing("chat-1", "alice")

        assert typing.clear_typing("chat-1", "alice") is True
        assert typing.is_typing("chat-1", "alice") is False

    def test_clear_typing_when_not_typing_is_noop(self):
        assert TypingTracker().clear_typing("chat-1", "alice") is False

    def test_typing_is_scoped_per_chat(self):
        typing = TypingTracker()
        typing.set_typing("chat-1", "alice")

        assert typing.is_typing("chat-2", "alice") is False
        assert typing.typing_in("chat-2") == set()

    def test_clear_all_for_returns_affected_chats(self):
        """
        Why it matters: Teardown uses the returned chats to tell room
        peers the user stopped typing.
        """
        typing = TypingTracker()
        typing.set_typing("chat-2", "alice")
        typing.set_typing("chat-1", "alice")
        typing.set_typing("chat-1", "bob")

        assert typing.clear_all_for("alice") == ["chat-1", "chat-2"]
        assert typing.typing_in("chat-1") == {"bob"}
        assert typing.typing_in("chat-2") == set()

    def test_clear_all_for_user_not_typing(self):
        assert TypingTracker().clear_all_for("alice") == []


# =============================================================================
# TestExpiry
# =============================================================================


class TestExpiry:
    """Tests for ttl-based expiry."""

    def test_indicator_expires_after_ttl(self):
        """
        A lost stop_typing does not leave the indicator on forever.

        Why it matters: Clients would show "typing..." indefinitely.
        """
        clock = FakeClock()
        typing = TypingTracker(ttl=8, clock=clock)
        typing.set_typing("chat-1", "alice")

        clock.advance(7.9)
        assert typing.is_typing("chat-1", "alice") is True

        clock.advance(0.1)
        assert typing.is_typing("chat-1", "alice") is False

    def test_refresh_extends_indicator(self):
        clock = FakeClock()
        typing = TypingTracker(ttl=8, clock=clock)
        typing.set_typing("chat-1", "alice")

        clock.advance(6)
        typing.set_typing("chat-1", "alice")
        clock.advance(6)

        assert typing.is_typing("chat-1", "alice") is True

    def test_set_typing_after_expiry_counts_as_start(self):
        clock = FakeClock()
        typing = TypingTracker(ttl=8, clock=clock)
        typing.set_typing("chat-1", "alice")

        clock.advance(10)

        assert typing.set_typing("chat-1", "alice") is True

    def test_expire_drops_stale_entries(self):
        clock = FakeClock()
        typing = TypingTracker(ttl=8, clock=clock)
        typing.set_typing("chat-1", "bob")
        typing.set_typing("chat-1", "alice")
        clock.advance(5)
        typing.set_typing("chat-2", "carol")
        clock.advance(4)

        expired = typing.expire()

        assert expired == [("chat-1", "alice"), ("chat-1", "bob")]
        assert typing.states.keys() == {("chat-2", "carol")}
        assert typing.clear_all_for("alice") == []

    def test_expire_accepts_explicit_time(self):
        clock = FakeClock()
        typing = TypingTracker(ttl=8, clock=clock)
        typing.set_typing("chat-1", "alice")

        assert typing.expire(now=clock.now + 1) == []
        assert typing.expire(now=clock.now + 8) == [("chat-1", "alice")]

    def test_zero_ttl_disables_expiry(self):
        clock = FakeClock()
        typing = TypingTracker(ttl=0, clock=clock)
        typing.set_typing("chat-1", "alice")

        clock.advance(3600)

        assert typing.ttl is None
        assert typing.expire() == []
        assert typing.is_typing("chat-1", "alice") is True

    def test_prepopulated_states_are_indexed(self):
        typing = TypingTracker(states={("chat-1", "alice"): 0.0})

        assert typing.clear_all_for("alice") == ["chat-1"]

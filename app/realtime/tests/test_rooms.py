"""
Tests for room membership.

Rooms are tracked per connection, so the tests speak in connection ids.
"""

from realtime.rooms import RoomMembership


class TestJoinLeave:
    """Tests for join() and leave()."""

    def test_join_adds_member(self):
        rooms = RoomMembership()

        assert rooms.join("c1", "chat-1") is True
        assert rooms.members_of("chat-1") == {"c1"}
        assert rooms.rooms_of("c1") == {"chat-1"}

    def test_join_is_idempotent(self):
        rooms = RoomMembership()
        rooms.join("c1", "chat-1")

        assert rooms.join("c1", "chat-1") is False
        assert rooms.members_of("chat-1") == {"c1"}

    def test_leave_removes_member(self):
        rooms = RoomMembership()
        rooms.join("c1", "chat-1")
        rooms.join("c2", "chat-1")

        assert rooms.leave("c1", "chat-1") is True
        assert rooms.members_of("chat-1") == {"c2"}

    def test_leave_unjoined_room_is_noop(self):
        rooms = RoomMembership()
        rooms.join("c1", "chat-1")

        assert rooms.leave("c1", "chat-2") is False
        assert rooms.leave("c9", "chat-1") is False
        assert rooms.members_of("chat-1") == {"c1"}

    def test_empty_rooms_are_dropped(self):
        """
        Why it matters: Without cleanup the index grows with every chat
        ever opened in the process.
        """
        rooms = RoomMembership()
        rooms.join("c1", "chat-1")

        rooms.leave("c1", "chat-1")

        assert rooms.members == {}
        assert rooms.subscriptions == {}

    def test_connections_of_same_user_are_independent(self):
        rooms = RoomMembership()
        rooms.join("tab-1", "chat-1")
        rooms.join("tab-2", "chat-2")

        assert rooms.members_of("chat-1") == {"tab-1"}
        assert rooms.members_of("chat-2") == {"tab-2"}


class TestLeaveAll:
    """Tests for leave_all()."""

    def test_leaves_every_room(self):
        """
        Why it matters: A closed connection left in a room would keep
        receiving typing and read events it can never consume.
        """
        rooms = RoomMembership()
        rooms.join("c1", "chat-1")
        rooms.join("c1", "chat-2")
        rooms.join("c2", "chat-2")

        left = rooms.leave_all("c1")

        assert left == {"chat-1", "chat-2"}
        assert rooms.members_of("chat-1") == frozenset()
        assert rooms.members_of("chat-2") == {"c2"}
        assert rooms.rooms_of("c1") == frozenset()

    def test_unknown_connection(self):
        assert RoomMembership().leave_all("c1") == frozenset()

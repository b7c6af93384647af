"""
Tests for the session registry.

Test Organization:
    - One class per registry operation
    - Registries are built on plain dicts; no database or event loop

Testing Philosophy:
    The registry is the single source for "which connections does this
    user have"; the relay and presence depend on it staying consistent in
    both directions.
"""

from realtime.sessions import SessionRegistry


# =============================================================================
# TestRegisterConnection
# =============================================================================


class TestRegisterConnection:
    """Tests for SessionRegistry.register_connection()."""

    def test_indexes_both_directions(self):
        registry = SessionRegistry()

        registry.register_connection("c1", "alice")

        assert registry.user_for("c1") == "alice"
        assert registry.listeners("alice") == {"c1"}

    def test_user_may_hold_several_connections(self):
        """
        Each tab or device of a user is its own connection.

        Why it matters: Messages must reach every device a user has open.
        """
        registry = SessionRegistry()

        registry.register_connection("c1", "alice")
        registry.register_connection("c2", "alice")

        assert registry.listeners("alice") == {"c1", "c2"}
        assert registry.connection_count() == 2

    def test_registering_twice_is_idempotent(self):
        registry = SessionRegistry()

        registry.register_connection("c1", "alice")
        registry.register_connection("c1", "alice")

        assert registry.listeners("alice") == {"c1"}
        assert registry.connection_count() == 1

    def test_rebinding_moves_connection_to_new_user(self):
        """
        A connection belongs to exactly one user at a time.

        Why it matters: A stale binding would deliver one user's messages
        to another user's socket.
        """
        registry = SessionRegistry()
        registry.register_connection("c1", "alice")

        registry.register_connection("c1", "bob")

        assert registry.user_for("c1") == "bob"
        assert registry.listeners("alice") == frozenset()
        assert "alice" not in registry.connections

    def test_uses_injected_storage(self):
        owners, connections = {}, {}
        registry = SessionRegistry(owners=owners, connections=connections)

        registry.register_connection("c1", "alice")

        assert owners == {"c1": "alice"}
        assert connections == {"alice": {"c1"}}


# =============================================================================
# TestUnregisterConnection
# =============================================================================


class TestUnregisterConnection:
    """Tests for SessionRegistry.unregister_connection()."""

    def test_returns_owner(self):
        registry = SessionRegistry()
        registry.register_connection("c1", "alice")

        assert registry.unregister_connection("c1") == "alice"
        assert registry.user_for("c1") is None

    def test_unknown_connection_is_noop(self):
        """
        Removing an unknown connection returns None without raising.

        Why it matters: Teardown can run twice for one connection (graceful
        close racing a network drop).
        """
        registry = SessionRegistry()

        assert registry.unregister_connection("missing") is None

    def test_second_unregister_is_noop(self):
        registry = SessionRegistry()
        registry.register_connection("c1", "alice")
        registry.unregister_connection("c1")

        assert registry.unregister_connection("c1") is None

    def test_last_connection_removes_user_entry(self):
        registry = SessionRegistry()
        registry.register_connection("c1", "alice")
        registry.register_connection("c2", "alice")

        registry.unregister_connection("c1")
        assert registry.is_connected("alice") is True

        registry.unregister_connection("c2")
        assert registry.is_connected("alice") is False
        assert registry.connections == {}


# =============================================================================
# TestQueries
# =============================================================================


class TestQueries:
    """Tests for has_other_connections() and listeners()."""

    def test_has_other_connections_excludes_given_connection(self):
        registry = SessionRegistry()
        registry.register_connection("c1", "alice")

        assert registry.has_other_connections("alice", "c1") is False

        registry.register_connection("c2", "alice")
        assert registry.has_other_connections("alice", "c1") is True

    def test_has_other_connections_for_unknown_user(self):
        assert SessionRegistry().has_other_connections("nobody", "c1") is False

    def test_listeners_of_unknown_user_is_empty(self):
        assert SessionRegistry().listeners("nobody") == frozenset()

    def test_listeners_is_a_snapshot(self):
        """
        Later registrations do not change a listeners() result.

        Why it matters: The relay iterates the result while connections
        keep opening and closing.
        """
        registry = SessionRegistry()
        registry.register_connection("c1", "alice")

        listeners = registry.listeners("alice")
        registry.register_connection("c2", "alice")

        assert listeners == {"c1"}

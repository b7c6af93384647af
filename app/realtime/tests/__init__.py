"""
Tests for realtime app.

This package contains test modules for:
- test_sessions.py, test_presence.py, test_rooms.py, test_typing_state.py:
  registry unit tests
- test_events.py, test_records.py: frame parsing and message records
- test_relay.py: fan-out, ordering and de-duplication
- test_lifecycle.py: setup, teardown and client event handling
- test_consumers.py, test_middleware.py: WebSocket stack
- test_receivers.py: relay on committed message writes
- test_views.py: presence endpoint

Usage:
    pytest realtime/tests/
    pytest realtime/tests/test_lifecycle.py
"""

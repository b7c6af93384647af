"""
Test configuration and fixtures for realtime tests.

This module provides:
- transport: RecordingTransport collecting every pushed event
- chat_store: StaticChatStore the relay falls back to
- clock: FakeClock driving typing expiry
- controller: A controller wired to those fakes, with the sweeper disabled

Usage:
    @pytest.mark.asyncio
    async def test_example(controller, transport):
        await controller.open("c1")
        await controller.setup("c1", "alice")
        assert transport.events_for("c1") == [("connected", {"userId": "alice"})]
"""

import pytest

from realtime.lifecycle import ConnectionLifecycleController
from realtime.relay import MessageRelay
from realtime.sessions import SessionRegistry
from realtime.tests.fakes import FakeClock, RecordingTransport, StaticChatStore
from realtime.typing_state import TypingTracker


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def chat_store():
    return StaticChatStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def controller(transport, chat_store, clock):
    """Controller on recording fakes; typing entries expire after 8s of FakeClock."""
    sessions = SessionRegistry()
    return ConnectionLifecycleController(
        transport=transport,
        sessions=sessions,
        typing=TypingTracker(ttl=8, clock=clock),
        relay=MessageRelay(
            sessions,
            transport,
            chat_store=chat_store,
            dedup_window=16,
            echo_to_sender_devices=False,
        ),
        sweep_interval=0,
    )

"""
Tests for message records built from committed rows and for the
ORM-backed chat store.
"""

import pytest
from channels.db import database_sync_to_async

from authentication.tests.factories import UserFactory
from chat.tests.factories import DirectChatFactory, MessageFactory
from core.exceptions import ValidationError
from realtime.records import ChatRecord, MessageRecord, coerce_id
from realtime.stores import DjangoChatStore


class TestCoerceId:
    """Tests for coerce_id()."""

    def test_reads_id_from_object(self):
        assert coerce_id({"_id": "u1"}, "user") == "u1"
        assert coerce_id({"id": 3}, "user") == "3"

    def test_strips_whitespace(self):
        assert coerce_id("  u1 ", "user") == "u1"

    def test_rejects_empty(self):
        with pytest.raises(ValidationError) as exc_info:
            coerce_id("", "user")

        assert exc_info.value.error_code == "MISSING_FIELD"

    def test_rejects_booleans(self):
        with pytest.raises(ValidationError) as exc_info:
            coerce_id(True, "user")

        assert exc_info.value.error_code == "INVALID_ID"


@pytest.mark.django_db
class TestFromMessage:
    """Tests for ChatRecord.from_chat() and MessageRecord.from_message()."""

    def test_chat_record_lists_participants(self):
        alice, bob = UserFactory(), UserFactory()
        chat = DirectChatFactory(users=[alice, bob])

        record = ChatRecord.from_chat(chat)

        assert record.id == str(chat.id)
        assert set(record.participant_ids) == {str(alice.id), str(bob.id)}
        assert record.is_group_chat is False

    def test_message_record_carries_routing_fields(self):
        """
        The wire payload embeds the chat's users.

        Why it matters: Clients route a receive_message to the right chat
        without another request.
        """
        alice, bob = UserFactory(), UserFactory()
        chat = DirectChatFactory(users=[alice, bob])
        message = MessageFactory(chat=chat, sender=alice, content="hello")

        record = MessageRecord.from_message(message)

        assert record.id == str(message.id)
        assert record.chat_id == str(chat.id)
        assert record.sender_id == str(alice.id)
        assert set(record.participant_ids) == {str(alice.id), str(bob.id)}

        wire = record.to_wire()
        assert wire["_id"] == str(message.id)
        assert wire["content"] == "hello"
        assert wire["chat"]["_id"] == str(chat.id)
        assert set(wire["chat"]["users"]) == {str(alice.id), str(bob.id)}


@database_sync_to_async
def create_direct_chat():
    alice, bob = UserFactory(), UserFactory()
    chat = DirectChatFactory(users=[alice, bob])
    return chat, {str(alice.id), str(bob.id)}


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
class TestDjangoChatStore:
    """Tests for the ORM-backed participant lookup."""

    async def test_returns_participants(self):
        chat, participant_ids = await create_direct_chat()

        result = await DjangoChatStore().participant_ids(str(chat.id))

        assert set(result) == participant_ids

    async def test_unknown_or_malformed_chat(self):
        """
        Why it matters: A client may name any chat id; the relay must get
        an empty fan-out, not an exception.
        """
        store = DjangoChatStore()

        assert await store.participant_ids("00000000-0000-0000-0000-000000000000") == ()
        assert await store.participant_ids("not-a-uuid") == ()

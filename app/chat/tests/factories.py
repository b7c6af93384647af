"""
Factory Boy factories for chat models.

Usage:
    from chat.tests.factories import (
        DirectChatFactory,
        GroupChatFactory,
        MessageFactory,
    )

    # Direct chat between two new users
    chat = DirectChatFactory()

    # Direct chat between specific users
    chat = DirectChatFactory(users=[alice, bob])

    # Message from one of the participants
    message = MessageFactory(chat=chat, sender=alice)
"""

import factory

from authentication.tests.factories import UserFactory
from chat.models import Chat, Message


class ChatFactory(factory.django.DjangoModelFactory):
    """
    Base factory for Chat model.

    Participants are passed with `users=[...]`; none are added otherwise.
    """

    class Meta:
        model = Chat
        skip_postgeneration_save = True

    chat_name = factory.Sequence(lambda n: f"Chat {n}")
    is_group_chat = False

    @factory.post_generation
    def users(self, create, extracted, **kwargs):
        if not create or not extracted:
            return
        self.users.add(*extracted)


class DirectChatFactory(ChatFactory):
    """
    Factory for direct chats.

    Creates two fresh participants unless `users` is given.
    """

    chat_name = "sender"

    @factory.post_generation
    def users(self, create, extracted, **kwargs):
        if not create:
            return
        self.users.add(*(extracted or [UserFactory(), UserFactory()]))


class GroupChatFactory(ChatFactory):
    """
    Factory for group chats.

    The admin is always added as a participant; two more members are created
    unless `users` is given.
    """

    is_group_chat = True
    chat_name = factory.Sequence(lambda n: f"Group {n}")
    group_admin = factory.SubFactory(UserFactory)

    @factory.post_generation
    def users(self, create, extracted, **kwargs):
        if not create:
            return
        members = extracted or [UserFactory(), UserFactory()]
        self.users.add(self.group_admin, *members)


class MessageFactory(factory.django.DjangoModelFactory):
    """
    Factory for Message model.

    Defaults to a text message from the first participant of a new direct chat.
    """

    class Meta:
        model = Message
        skip_postgeneration_save = True

    chat = factory.SubFactory(DirectChatFactory)
    sender = factory.LazyAttribute(lambda o: o.chat.users.order_by("pk").first())
    content = factory.Sequence(lambda n: f"Message {n}")


class FileMessageFactory(MessageFactory):
    """Factory for messages carrying a file."""

    content = ""
    is_file_message = True
    file_url = factory.Sequence(lambda n: f"https://files.example.com/{n}.pdf")
    file_type = "application/pdf"
    file_name = factory.Sequence(lambda n: f"document-{n}.pdf")

"""
Chat app: the persisted chat and message store.

This app handles:
- Chats (direct and group) and their participants
- Message sending and history
- Read receipts

Related apps:
    - authentication: User model for participants
    - realtime: Relays committed messages to live connections

Usage:
    from chat.services import ChatService, MessageService

    chat = ChatService.access_direct(user, other_user).data
    result = MessageService.send_message(chat=chat, sender=user, content="Hello!")
"""

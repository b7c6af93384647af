"""
Realtime app: presence and message delivery over WebSockets.

This app handles:
- Which users are connected, on how many connections
- Online/offline presence derived from those connections
- Chat room subscriptions per connection
- Ephemeral typing indicators
- Relaying committed messages to every live connection of the other
  participants

Related apps:
    - chat: Persisted chats and messages; its message_created signal
      feeds the relay
    - authentication: JWT-authenticated users bound to connections

Usage:
    from realtime.apps import get_controller

    controller = get_controller()
    controller.presence.snapshot()
"""

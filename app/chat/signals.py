"""
Chat signals.

Signals:
    message_created: Sent after a message write has been committed.
        Receivers get ``message`` (the persisted Message instance).
        The realtime app subscribes to relay the message to live
        connections; see realtime/receivers.py.
"""

from django.dispatch import Signal

message_created = Signal()

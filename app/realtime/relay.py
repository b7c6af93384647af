"""
Message relay: pushes persisted messages to live connections.

deliver() computes the fan-out of a message as every live connection of
every chat participant except the sender, and sends it ``receive_message``
on each. The sender's own client renders the message optimistically.

Guarantees:
    - Best-effort, at most once per connection per message: no ack, no
      retry, no redelivery queue. Offline participants are skipped and
      catch up through message history.
    - Fan-out is derived from the session registry at send time, after any
      await on the chat store, so connections that closed in between are
      not addressed and new ones are.
    - Messages relayed one after another reach a connection in that order.
    - A message id is relayed once. The same message may arrive both from
      the write hook and from a client new_message event; repeats within
      the de-duplication window are dropped.

Usage:
    relay = MessageRelay(sessions, transport, chat_store=DjangoChatStore())
    report = await relay.deliver(MessageRecord.from_message(message))
    report.delivered   # connection ids reached
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from realtime.constants import get_setting
from realtime.events import ServerEvent

if TYPE_CHECKING:
    from realtime.protocols import ChatStore, Transport
    from realtime.records import MessageRecord
    from realtime.sessions import SessionRegistry

logger = logging.getLogger(__name__)


@dataclass
class DeliveryReport:
    """
    Outcome of one deliver() call.

    Attributes:
        message_id: Id of the relayed message (None if it had none)
        delivered: Connection ids the message was handed to
        offline: Participants without a live connection
        dropped: Connection ids the transport could not reach
        duplicate: The message had already been relayed
    """

    message_id: str | None
    delivered: list[str] = field(default_factory=list)
    offline: list[str] = field(default_factory=list)
    dropped: list[str] = field(default_factory=list)
    duplicate: bool = False


class MessageRelay:
    """Fans persisted messages out to participants' live connections."""

    def __init__(
        self,
        sessions: SessionRegistry,
        transport: Transport,
        chat_store: ChatStore | None = None,
        dedup_window: int | None = None,
        echo_to_sender_devices: bool | None = None,
    ):
        self.sessions = sessions
        self.transport = transport
        self.chat_store = chat_store
        self.dedup_window = (
            get_setting("RELAY_DEDUP_WINDOW") if dedup_window is None else dedup_window
        )
        self.echo_to_sender_devices = (
            get_setting("ECHO_TO_SENDER_DEVICES")
            if echo_to_sender_devices is None
            else echo_to_sender_devices
        )
        self._recent: OrderedDict[str, None] = OrderedDict()

    async def deliver(
        self,
        record: MessageRecord,
        origin_connection_id: str | None = None,
    ) -> DeliveryReport:
        """
        Relay a persisted message to the other participants.

        Args:
            record: The message to relay
            origin_connection_id: Connection the message was sent from, if
                it came in over the socket

        Returns:
            DeliveryReport describing who was reached
        """
        report = DeliveryReport(message_id=record.id)

        # Claimed before any await so a concurrent repeat is dropped too
        if not self._claim(record.id):
            logger.debug(f"Skipping duplicate relay of message {record.id}")
            report.duplicate = True
            return report

        participants = record.participant_ids
        if participants is None and self.chat_store is not None:
            participants = await self.chat_store.participant_ids(record.chat_id)

        targets = self._fan_out(record, participants or (), origin_connection_id, report)

        payload = record.to_wire()
        for connection_id in targets:
            if await self.transport.send(
                connection_id, ServerEvent.RECEIVE_MESSAGE, payload
            ):
                report.delivered.append(connection_id)
            else:
                report.dropped.append(connection_id)

        logger.info(
            f"Relayed message {record.id} in chat {record.chat_id} to "
            f"{len(report.delivered)} connections "
            f"({len(report.offline)} participants offline)"
        )
        return report

    def _fan_out(
        self,
        record: MessageRecord,
        participants: tuple[str, ...],
        origin_connection_id: str | None,
        report: DeliveryReport,
    ) -> list[str]:
        targets: list[str] = []
        for user_id in dict.fromkeys(participants):
            listeners = self.sessions.listeners(user_id)

            if user_id == record.sender_id:
                if self.echo_to_sender_devices and origin_connection_id is not None:
                    targets.extend(sorted(listeners - {origin_connection_id}))
                continue

            if not listeners:
                report.offline.append(user_id)
                continue
            targets.extend(sorted(listeners))
        return targets

    def _claim(self, message_id: str | None) -> bool:
        """Remember message_id; False if it was already relayed."""
        if message_id is None or not self.dedup_window:
            return True
        if message_id in self._recent:
            self._recent.move_to_end(message_id)
            return False

        self._recent[message_id] = None
        while len(self._recent) > self.dedup_window:
            self._recent.popitem(last=False)
        return True

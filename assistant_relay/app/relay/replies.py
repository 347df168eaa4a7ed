from __future__ import annotations

import logging
from typing import Iterable

from assistant_relay.app.relay.contracts import RemoteMessage, Role, Thread
from assistant_relay.app.relay.errors import NoReplyError
from assistant_relay.app.relay.transport import Transport
from assistant_relay.app.relay.wire import MessageListResponse, parse_response

LOGGER = logging.getLogger(__name__)


def select_latest_assistant_message(
    messages: Iterable[RemoteMessage],
) -> RemoteMessage | None:
    """Newest assistant message by ``created_at``; equal timestamps go to the later one."""
    latest: RemoteMessage | None = None
    for message in messages:
        if message.role != Role.ASSISTANT.value:
            continue
        if latest is None or message.created_at >= latest.created_at:
            latest = message
    return latest


class ReplyExtractor:
    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def fetch_messages(self, thread: Thread) -> list[RemoteMessage]:
        response = self._transport.get(f"threads/{thread.id}/messages")
        listing = parse_response(MessageListResponse, response.body)
        return [message.to_remote_message() for message in listing.data]

    def latest_reply(self, thread: Thread) -> str:
        messages = self.fetch_messages(thread)
        latest = select_latest_assistant_message(messages)
        if latest is None:
            LOGGER.error(
                "No assistant message among %d messages in thread %s",
                len(messages),
                thread.id,
            )
            raise NoReplyError(thread_id=thread.id)
        reply = latest.text.strip()
        LOGGER.debug(
            "Extracted latest assistant content (ts=%s, %d chars)",
            latest.created_at,
            len(reply),
        )
        return reply

from __future__ import annotations

import logging

from assistant_relay.app.relay.contracts import Role, Thread, Turn
from assistant_relay.app.relay.transport import Transport
from assistant_relay.app.relay.wire import (
    EmptyRequest,
    MessageCreateRequest,
    ThreadCreateResponse,
    parse_response,
)

LOGGER = logging.getLogger(__name__)


class ThreadLifecycleManager:
    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def create(self) -> Thread:
        response = self._transport.post("threads", EmptyRequest())
        created = parse_response(ThreadCreateResponse, response.body)
        LOGGER.debug("Thread created with id %s", created.id)
        return Thread(id=created.id)

    def append(self, thread: Thread, turn: Turn) -> None:
        role = turn.role.value if isinstance(turn.role, Role) else str(turn.role)
        self._transport.post(
            f"threads/{thread.id}/messages",
            MessageCreateRequest(role=role, content=turn.content),
        )
        LOGGER.debug("Appended %s message to thread %s", role, thread.id)

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from assistant_relay.app.relay.client import ConversationRelayClient
from assistant_relay.app.relay.contracts import Conversation
from assistant_relay.app.relay.ticker import CancellationToken


@dataclass
class _LeaseEntry:
    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0


class SerializedRelay:
    """Runs at most one relay at a time per caller-supplied conversation key.

    Relays under different keys run concurrently. Lock entries are dropped
    once nobody holds or waits on them.
    """

    def __init__(self, client: ConversationRelayClient) -> None:
        self._client = client
        self._entries: dict[str, _LeaseEntry] = {}
        self._registry_lock = threading.Lock()

    @property
    def active_keys(self) -> frozenset[str]:
        with self._registry_lock:
            return frozenset(self._entries)

    @contextmanager
    def lease(self, conversation_key: str) -> Iterator[None]:
        with self._registry_lock:
            entry = self._entries.setdefault(conversation_key, _LeaseEntry())
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._registry_lock:
                entry.holders -= 1
                if entry.holders == 0:
                    self._entries.pop(conversation_key, None)

    def relay(
        self,
        conversation_key: str,
        conversation: Conversation,
        assistant_id: str,
        timeout_seconds: float | None = None,
        *,
        cancellation: CancellationToken | None = None,
    ) -> str:
        with self.lease(conversation_key):
            return self._client.relay(
                conversation,
                assistant_id,
                timeout_seconds,
                cancellation=cancellation,
            )

    def summarize(
        self,
        conversation_key: str,
        message: str,
        assistant_id: str | None = None,
        *,
        cancellation: CancellationToken | None = None,
    ) -> str:
        with self.lease(conversation_key):
            return self._client.summarize(
                message, assistant_id, cancellation=cancellation
            )

from __future__ import annotations

from typing import Iterable

from assistant_relay.app.memory.contracts import StoredChatMessage
from assistant_relay.app.relay.contracts import Role, Turn

DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."
USER_SENDER = "user"


def turn_from_stored_message(message: StoredChatMessage) -> Turn:
    role = Role.USER if message.sender == USER_SENDER else Role.ASSISTANT
    return Turn(role=role, content=message.content)


def build_conversation(
    messages: Iterable[StoredChatMessage],
    *,
    system_prompt: str | None = DEFAULT_SYSTEM_PROMPT,
) -> tuple[Turn, ...]:
    turns: list[Turn] = []
    if system_prompt:
        turns.append(Turn(role=Role.SYSTEM, content=system_prompt))
    turns.extend(turn_from_stored_message(message) for message in messages)
    return tuple(turns)

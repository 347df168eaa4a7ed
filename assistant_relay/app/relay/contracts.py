from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class RunStatus(str, Enum):
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({RunStatus.COMPLETED.value, RunStatus.FAILED.value})


class RelayPhase(str, Enum):
    CREATE = "create"
    APPEND = "append"
    START = "start"
    POLL = "poll"
    FETCH = "fetch"


@dataclass(frozen=True)
class Turn:
    role: Role
    content: str


Conversation = Sequence[Turn]


@dataclass(frozen=True)
class Thread:
    id: str


@dataclass(frozen=True)
class Run:
    id: str
    status: str

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


@dataclass(frozen=True)
class ContentBlock:
    text: str | None


@dataclass(frozen=True)
class RemoteMessage:
    role: str
    content: tuple[ContentBlock, ...]
    created_at: int

    @property
    def text(self) -> str:
        return "".join(block.text for block in self.content if block.text is not None)

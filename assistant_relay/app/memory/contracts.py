from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StoredChatMessage:
    sender: str
    content: str

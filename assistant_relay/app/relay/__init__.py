from .client import ConversationRelayClient, build_relay_client
from .contracts import Conversation, RelayPhase, Role, Run, RunStatus, Thread, Turn
from .errors import (
    NoReplyError,
    PollCancelledError,
    ProtocolError,
    RelayClientError,
    RelayConfigurationError,
    RelayError,
    RunFailedError,
    RunTimeoutError,
    TransportError,
)
from .guard import SerializedRelay
from .ticker import CancellationToken

__all__ = [
    "CancellationToken",
    "Conversation",
    "ConversationRelayClient",
    "NoReplyError",
    "PollCancelledError",
    "ProtocolError",
    "RelayClientError",
    "RelayConfigurationError",
    "RelayError",
    "RelayPhase",
    "Role",
    "Run",
    "RunFailedError",
    "RunStatus",
    "RunTimeoutError",
    "SerializedRelay",
    "Thread",
    "TransportError",
    "Turn",
    "build_relay_client",
]

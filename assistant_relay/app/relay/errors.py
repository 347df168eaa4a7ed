from __future__ import annotations

from assistant_relay.app.relay.contracts import RelayPhase


class RelayClientError(Exception):
    """Base class for everything the relay client raises.

    ``phase`` is filled in by the relay client when the error crosses its
    boundary, so callers can tell which step failed without catching the
    individual subclasses.
    """

    phase: RelayPhase | None = None


class RelayConfigurationError(RelayClientError):
    pass


class TransportError(RelayClientError):
    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ProtocolError(RelayClientError):
    def __init__(self, message: str, *, body: str | None = None) -> None:
        super().__init__(message)
        self.body = body


class RunFailedError(RelayClientError):
    def __init__(self, *, thread_id: str, run_id: str, body: str) -> None:
        super().__init__(f"Assistant run {run_id} failed: {body}")
        self.thread_id = thread_id
        self.run_id = run_id
        self.body = body


class RunTimeoutError(RelayClientError, TimeoutError):
    def __init__(self, *, elapsed_seconds: float, thread_id: str, run_id: str) -> None:
        super().__init__(
            f"Timeout after {elapsed_seconds:.1f} seconds waiting for run "
            f"{run_id} in thread {thread_id}"
        )
        self.elapsed_seconds = elapsed_seconds
        self.thread_id = thread_id
        self.run_id = run_id


class PollCancelledError(RelayClientError):
    def __init__(self, *, thread_id: str, run_id: str) -> None:
        super().__init__(
            f"Polling cancelled for run {run_id} in thread {thread_id}"
        )
        self.thread_id = thread_id
        self.run_id = run_id


class NoReplyError(RelayClientError):
    def __init__(self, *, thread_id: str) -> None:
        super().__init__(f"No assistant response found in thread {thread_id}")
        self.thread_id = thread_id


class RelayError(RelayClientError):
    def __init__(self, phase: RelayPhase, cause: RelayClientError) -> None:
        super().__init__(f"Relay failed during {phase.value}: {cause}")
        self.phase = phase
        self.cause = cause

    @property
    def body(self) -> str | None:
        return getattr(self.cause, "body", None)

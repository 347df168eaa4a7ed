from __future__ import annotations

import logging
import time
from types import TracebackType
from typing import Callable, TypeVar

from assistant_relay.app.observability.contracts import RelayTrace, StepTrace
from assistant_relay.app.observability.service import (
    emit_relay_telemetry,
    new_trace_id,
    step_trace,
)
from assistant_relay.app.relay.contracts import (
    Conversation,
    RelayPhase,
    Role,
    Run,
    Thread,
    Turn,
)
from assistant_relay.app.relay.errors import (
    ProtocolError,
    RelayClientError,
    RelayConfigurationError,
    RelayError,
    TransportError,
)
from assistant_relay.app.relay.replies import ReplyExtractor
from assistant_relay.app.relay.runs import DEFAULT_RUN_TIMEOUT_SECONDS, RunController
from assistant_relay.app.relay.threads import ThreadLifecycleManager
from assistant_relay.app.relay.ticker import CancellationToken
from assistant_relay.app.relay.transport import HttpTransport, Transport
from assistant_relay.core.config import RelayConfig

LOGGER = logging.getLogger(__name__)

StepResult = TypeVar("StepResult")


class ConversationRelayClient:
    """Relays a conversation to the assistant backend and returns its reply.

    Each call to :meth:`relay` creates its own thread and run, replays the
    turns in order, waits for the run and reads back the newest assistant
    message. Nothing is cached between calls, so concurrent relays never
    share backend resources. Callers that need at most one relay per logical
    conversation wrap the client in
    :class:`assistant_relay.app.relay.guard.SerializedRelay`.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        threads: ThreadLifecycleManager | None = None,
        runs: RunController | None = None,
        replies: ReplyExtractor | None = None,
        timeout_seconds: float = DEFAULT_RUN_TIMEOUT_SECONDS,
        summary_assistant_id: str | None = None,
    ) -> None:
        self._threads = threads or ThreadLifecycleManager(transport)
        self._runs = runs or RunController(transport)
        self._replies = replies or ReplyExtractor(transport)
        self._transport = transport
        self._timeout_seconds = timeout_seconds
        self._summary_assistant_id = summary_assistant_id

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> ConversationRelayClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def relay(
        self,
        conversation: Conversation,
        assistant_id: str,
        timeout_seconds: float | None = None,
        *,
        cancellation: CancellationToken | None = None,
    ) -> str:
        if not assistant_id or not assistant_id.strip():
            raise RelayConfigurationError("Relay requires a non-empty assistant id")
        turns = tuple(conversation)
        timeout = self._timeout_seconds if timeout_seconds is None else timeout_seconds
        started_at = time.perf_counter()
        steps: list[StepTrace] = []
        thread: Thread | None = None
        run: Run | None = None
        outcome = "error"
        LOGGER.info(
            "Relaying conversation of %d turns to assistant %s",
            len(turns),
            assistant_id,
        )
        try:
            thread = self._step(RelayPhase.CREATE, steps, self._threads.create)
            for turn in turns:
                self._step(
                    RelayPhase.APPEND,
                    steps,
                    lambda turn=turn: self._threads.append(thread, turn),
                )
            run = self._step(
                RelayPhase.START,
                steps,
                lambda: self._runs.start(thread, assistant_id),
            )
            self._step(
                RelayPhase.POLL,
                steps,
                lambda: self._runs.await_completion(
                    thread, run, timeout, cancellation=cancellation
                ),
            )
            reply = self._step(
                RelayPhase.FETCH,
                steps,
                lambda: self._replies.latest_reply(thread),
            )
            outcome = "ok"
            return reply
        finally:
            emit_relay_telemetry(
                RelayTrace(
                    trace_id=new_trace_id(),
                    assistant_id=assistant_id,
                    turn_count=len(turns),
                    latency_ms=int((time.perf_counter() - started_at) * 1000),
                    outcome=outcome,
                    thread_id=thread.id if thread else None,
                    run_id=run.id if run else None,
                ),
                steps,
                logger=LOGGER,
            )

    def summarize(
        self,
        message: str,
        assistant_id: str | None = None,
        *,
        cancellation: CancellationToken | None = None,
    ) -> str:
        resolved_assistant = assistant_id or self._summary_assistant_id
        if not resolved_assistant:
            raise RelayConfigurationError(
                "No assistant configured for summaries (missing SUMMARY_ASSISTANT_ID)"
            )
        conversation = (Turn(role=Role.USER, content=message),)
        return self.relay(conversation, resolved_assistant, cancellation=cancellation)

    def _step(
        self,
        phase: RelayPhase,
        steps: list[StepTrace],
        operation: Callable[[], StepResult],
    ) -> StepResult:
        started_at = time.perf_counter()
        try:
            result = operation()
        except (TransportError, ProtocolError) as exc:
            steps.append(step_trace(phase.value, started_at, status="error", error=exc))
            LOGGER.error("Relay %s step failed: %s", phase.value, exc)
            raise RelayError(phase, exc) from exc
        except RelayClientError as exc:
            steps.append(step_trace(phase.value, started_at, status="error", error=exc))
            exc.phase = phase
            raise
        steps.append(step_trace(phase.value, started_at))
        return result


def build_relay_client(
    config: RelayConfig,
    *,
    transport: Transport | None = None,
) -> ConversationRelayClient:
    if transport is None:
        if not config.api_key:
            raise RelayConfigurationError(
                "Assistant relay is not configured (missing OPENAI_API_KEY)"
            )
        transport = HttpTransport(
            api_key=config.api_key,
            base_url=config.base_url,
            protocol_version=config.protocol_version,
            timeout_seconds=config.http_timeout_seconds,
        )
    return ConversationRelayClient(
        transport,
        runs=RunController(
            transport, poll_interval_seconds=config.poll_interval_seconds
        ),
        timeout_seconds=config.timeout_seconds,
        summary_assistant_id=config.summary_assistant_id,
    )

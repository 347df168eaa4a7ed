from __future__ import annotations

import logging
import time

from assistant_relay.app.relay.contracts import Run, RunStatus, Thread
from assistant_relay.app.relay.errors import (
    PollCancelledError,
    RunFailedError,
    RunTimeoutError,
)
from assistant_relay.app.relay.ticker import (
    CancellationToken,
    Clock,
    PollTicker,
    Waiter,
)
from assistant_relay.app.relay.transport import Transport
from assistant_relay.app.relay.wire import (
    RunCreateRequest,
    RunCreateResponse,
    RunStatusResponse,
    parse_response,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 0.5
DEFAULT_RUN_TIMEOUT_SECONDS = 60.0


class RunController:
    """Starts runs on a thread and polls them until they finish.

    Only ``completed`` and ``failed`` end the polling. Every other status the
    backend reports, known or not, counts as still pending and is polled
    again until the deadline passes.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        clock: Clock = time.monotonic,
        waiter: Waiter | None = None,
    ) -> None:
        self._transport = transport
        self._poll_interval = poll_interval_seconds
        self._clock = clock
        self._waiter = waiter

    def start(self, thread: Thread, assistant_id: str) -> Run:
        response = self._transport.post(
            f"threads/{thread.id}/runs",
            RunCreateRequest(assistant_id=assistant_id),
        )
        created = parse_response(RunCreateResponse, response.body)
        LOGGER.debug(
            "Run %s started on thread %s with status %s",
            created.id,
            thread.id,
            created.status,
        )
        return Run(id=created.id, status=created.status)

    def poll(self, thread: Thread, run: Run) -> tuple[Run, str]:
        response = self._transport.get(f"threads/{thread.id}/runs/{run.id}")
        status = parse_response(RunStatusResponse, response.body).status
        return Run(id=run.id, status=status), response.body

    def await_completion(
        self,
        thread: Thread,
        run: Run,
        timeout_seconds: float = DEFAULT_RUN_TIMEOUT_SECONDS,
        *,
        cancellation: CancellationToken | None = None,
    ) -> Run:
        ticker = PollTicker(
            self._poll_interval,
            token=cancellation,
            clock=self._clock,
            waiter=self._waiter,
        )
        LOGGER.info(
            "Polling run completion: thread_id=%s run_id=%s timeout=%ss",
            thread.id,
            run.id,
            timeout_seconds,
        )
        while True:
            if ticker.cancelled:
                LOGGER.warning("Polling interrupted for run %s", run.id)
                raise PollCancelledError(thread_id=thread.id, run_id=run.id)

            elapsed = ticker.elapsed()
            if elapsed >= timeout_seconds:
                error = RunTimeoutError(
                    elapsed_seconds=elapsed, thread_id=thread.id, run_id=run.id
                )
                LOGGER.error("%s", error)
                raise error

            current, body = self.poll(thread, run)
            LOGGER.debug("Run %s status: %s", run.id, current.status)
            if current.status == RunStatus.COMPLETED.value:
                LOGGER.info(
                    "Run %s succeeded after %dms", run.id, int(ticker.elapsed() * 1000)
                )
                return current
            if current.status == RunStatus.FAILED.value:
                LOGGER.error("Assistant run %s failed: %s", run.id, body)
                raise RunFailedError(thread_id=thread.id, run_id=run.id, body=body)

            if not ticker.tick(deadline_seconds=timeout_seconds):
                LOGGER.warning("Polling interrupted for run %s", run.id)
                raise PollCancelledError(thread_id=thread.id, run_id=run.id)

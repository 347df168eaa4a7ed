from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict
from uuid import uuid4

from assistant_relay.app.observability.contracts import RelayTrace, StepTrace


def new_trace_id() -> str:
    return f"relay-{uuid4().hex[:10]}"


def step_trace(
    phase: str,
    started_at: float,
    *,
    status: str = "ok",
    error: BaseException | None = None,
) -> StepTrace:
    elapsed_ms = int((time.perf_counter() - started_at) * 1000)
    return StepTrace(
        phase=phase,
        latency_ms=max(elapsed_ms, 0),
        status=status,
        error_class=type(error).__name__ if error is not None else None,
    )


def emit_relay_telemetry(
    trace: RelayTrace,
    steps: list[StepTrace],
    logger: logging.Logger | None = None,
) -> None:
    active_logger = logger or logging.getLogger(__name__)
    base = asdict(trace)
    for step in steps:
        payload = {**base, "event": "relay_step", **asdict(step)}
        active_logger.debug("relay_event %s", json.dumps(payload, sort_keys=True))
    active_logger.info(
        "relay_event %s",
        json.dumps({**base, "event": "relay_finished"}, sort_keys=True),
    )

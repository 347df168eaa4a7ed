from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StepTrace:
    phase: str
    latency_ms: int
    status: str
    error_class: str | None = None


@dataclass(frozen=True)
class RelayTrace:
    trace_id: str
    assistant_id: str
    turn_count: int
    latency_ms: int
    outcome: str
    thread_id: str | None = None
    run_id: str | None = None

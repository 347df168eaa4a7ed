from __future__ import annotations

import json
from typing import Callable, Iterable

import httpx
import pytest

from assistant_relay.app.relay.client import ConversationRelayClient
from assistant_relay.app.relay.runs import RunController
from assistant_relay.app.relay.transport import HttpTransport

BASE_URL = "https://assistant.test/v1"
API_KEY = "test-key"


class FakeAssistantBackend:
    """In-memory stand-in for the threads API, served through httpx.MockTransport."""

    def __init__(
        self,
        *,
        statuses: Iterable[str] = ("completed",),
        messages: list[dict[str, object]] | None = None,
    ) -> None:
        self._statuses = list(statuses)
        self.messages = messages if messages is not None else []
        self.overrides: dict[str, httpx.Response | Exception] = {}
        self.requests: list[httpx.Request] = []
        self.calls: list[str] = []
        self.appended: list[dict[str, object]] = []
        self.run_requests: list[dict[str, object]] = []
        self._thread_count = 0

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.path.removeprefix("/v1/").strip("/").split("/")
        route = self._route(request.method, parts)
        self.calls.append(route)

        override = self.overrides.get(route)
        if isinstance(override, Exception):
            raise override
        if override is not None:
            return override

        if route == "create_thread":
            self._thread_count += 1
            return httpx.Response(200, json={"id": f"thread_{self._thread_count}"})
        if route == "append_message":
            payload = json.loads(request.content)
            self.appended.append(payload)
            return httpx.Response(200, json={"id": f"msg_{len(self.appended)}"})
        if route == "start_run":
            self.run_requests.append(json.loads(request.content))
            return httpx.Response(200, json={"id": "run_1", "status": "queued"})
        if route == "poll_run":
            status = self._statuses.pop(0) if len(self._statuses) > 1 else self._statuses[0]
            body: dict[str, object] = {"id": parts[-1], "status": status}
            if status == "failed":
                body["last_error"] = {"code": "server_error", "message": "boom"}
            return httpx.Response(200, json=body)
        if route == "list_messages":
            return httpx.Response(200, json={"object": "list", "data": self.messages})
        return httpx.Response(404, json={"error": {"message": "unknown route"}})

    @staticmethod
    def _route(method: str, parts: list[str]) -> str:
        if method == "POST" and parts == ["threads"]:
            return "create_thread"
        if len(parts) == 3 and parts[2] == "messages":
            return "append_message" if method == "POST" else "list_messages"
        if method == "POST" and len(parts) == 3 and parts[2] == "runs":
            return "start_run"
        if method == "GET" and len(parts) == 4 and parts[2] == "runs":
            return "poll_run"
        return "unknown"

    @property
    def poll_count(self) -> int:
        return self.calls.count("poll_run")


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.waits: list[float] = []

    def __call__(self) -> float:
        return self.now

    def wait(self, seconds: float) -> bool:
        self.waits.append(seconds)
        self.now += seconds
        return False


def assistant_message(
    text_blocks: list[str], created_at: int, role: str = "assistant"
) -> dict[str, object]:
    return {
        "id": f"msg_{created_at}",
        "object": "thread.message",
        "role": role,
        "created_at": created_at,
        "content": [
            {"type": "text", "text": {"value": text, "annotations": []}}
            for text in text_blocks
        ],
    }


def build_transport(backend: FakeAssistantBackend) -> HttpTransport:
    return HttpTransport(
        api_key=API_KEY,
        base_url=BASE_URL,
        protocol_version="assistants=v2",
        client=httpx.Client(transport=httpx.MockTransport(backend.handle)),
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_backend() -> Callable[..., FakeAssistantBackend]:
    return FakeAssistantBackend


@pytest.fixture
def make_transport() -> Callable[[FakeAssistantBackend], HttpTransport]:
    return build_transport


@pytest.fixture
def make_client(
    fake_clock: FakeClock,
) -> Callable[..., ConversationRelayClient]:
    def _make(
        backend: FakeAssistantBackend,
        *,
        timeout_seconds: float = 60.0,
        poll_interval_seconds: float = 0.5,
    ) -> ConversationRelayClient:
        transport = build_transport(backend)
        runs = RunController(
            transport,
            poll_interval_seconds=poll_interval_seconds,
            clock=fake_clock,
            waiter=fake_clock.wait,
        )
        return ConversationRelayClient(
            transport,
            runs=runs,
            timeout_seconds=timeout_seconds,
            summary_assistant_id="asst_summary",
        )

    return _make


@pytest.fixture
def message_factory() -> Callable[..., dict[str, object]]:
    return assistant_message

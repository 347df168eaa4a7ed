from __future__ import annotations

import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Protocol

import httpx
from pydantic import BaseModel

from assistant_relay.app.relay.errors import TransportError

LOGGER = logging.getLogger(__name__)

PROTOCOL_HEADER = "OpenAI-Beta"


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(Protocol):
    def post(self, path: str, payload: BaseModel) -> TransportResponse: ...

    def get(self, path: str) -> TransportResponse: ...

    def close(self) -> None: ...


class HttpTransport:
    """Authenticated JSON transport for the assistant backend.

    Every request carries the bearer credential and the protocol marker
    header. Non-2xx answers are read as error bodies and raised as
    ``TransportError`` with the body kept verbatim.
    """

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        protocol_version: str,
        timeout_seconds: float = 20.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._protocol_version = protocol_version
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout_seconds)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            PROTOCOL_HEADER: self._protocol_version,
        }

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def post(self, path: str, payload: BaseModel) -> TransportResponse:
        return self._send("POST", path, content=payload.model_dump_json())

    def get(self, path: str) -> TransportResponse:
        return self._send("GET", path)

    def _send(
        self, method: str, path: str, *, content: str | None = None
    ) -> TransportResponse:
        url = self._url(path)
        try:
            response = self._client.request(
                method,
                url,
                headers=self._headers(),
                content=content,
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc

        result = TransportResponse(status_code=response.status_code, body=response.text)
        if not result.ok:
            LOGGER.debug(
                "Backend returned %s for %s %s: %s",
                result.status_code,
                method,
                path,
                result.body,
            )
            raise TransportError(
                f"{method} {path} returned HTTP {result.status_code}",
                status_code=result.status_code,
                body=result.body,
            )
        return result

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel, Field, ValidationError

from assistant_relay.app.relay.contracts import (
    ContentBlock,
    RemoteMessage,
    RunStatus,
)
from assistant_relay.app.relay.errors import ProtocolError


class EmptyRequest(BaseModel):
    pass


class MessageCreateRequest(BaseModel):
    role: str
    content: str


class RunCreateRequest(BaseModel):
    assistant_id: str = Field(min_length=1)


class ThreadCreateResponse(BaseModel):
    id: str = Field(min_length=1)


class RunCreateResponse(BaseModel):
    id: str = Field(min_length=1)
    status: str = RunStatus.QUEUED.value


class RunStatusResponse(BaseModel):
    status: str


class TextValue(BaseModel):
    value: str | None = None


class WireContentBlock(BaseModel):
    type: str | None = None
    text: TextValue | None = None


class WireMessage(BaseModel):
    role: str | None = None
    created_at: int | None = None
    content: list[WireContentBlock] | None = None

    def to_remote_message(self) -> RemoteMessage:
        return RemoteMessage(
            role=self.role or "",
            content=tuple(
                ContentBlock(text=block.text.value if block.text else None)
                for block in self.content or ()
            ),
            created_at=self.created_at or 0,
        )


class MessageListResponse(BaseModel):
    data: list[WireMessage]


ResponseModel = TypeVar("ResponseModel", bound=BaseModel)


def parse_response(model: type[ResponseModel], body: str) -> ResponseModel:
    try:
        return model.model_validate_json(body)
    except ValidationError as exc:
        fields = sorted(
            {".".join(str(part) for part in error["loc"]) or "<body>" for error in exc.errors()}
        )
        raise ProtocolError(
            f"{model.__name__} is missing or has invalid fields: {', '.join(fields)}",
            body=body,
        ) from exc

"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ispmedia.domain.entities import NotificationType


class NotificationCreate(BaseModel):
    """Payload used by administrators to send a notification to a user."""

    user_id: int = Field(..., description="Identificador do utilizador destinatário")
    type: NotificationType = Field(..., description="Tipo de notificação")
    title: str = Field(..., max_length=255)
    message: str
    data: dict[str, Any] | None = None

    @field_validator("title", "message")
    @classmethod
    def _require_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Campo obrigatório")
        return stripped


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    user_id: int
    type: NotificationType
    title: str
    message: str
    data: dict[str, Any] | None = None
    is_read: bool = False
    created_at: datetime | None = None


class NotificationList(BaseModel):
    notifications: list[NotificationRead]
    unread_count: int


class NotificationCreateResponse(BaseModel):
    message: str
    notification: NotificationRead


class ContentUpdateBroadcast(BaseModel):
    """Payload used by editors to announce a catalogue change."""

    user_ids: list[int] | None = Field(
        default=None,
        description="Destinatários; quando omitido a notificação vai para todos os editores",
    )
    title: str = Field(..., max_length=255)
    message: str
    content_type: str | None = Field(default=None, max_length=50)
    content_id: int | None = None
    data: dict[str, Any] | None = None

    @field_validator("title", "message")
    @classmethod
    def _require_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Campo obrigatório")
        return stripped


class ContentUpdateBroadcastResponse(BaseModel):
    message: str
    recipients: int


class MessageResponse(BaseModel):
    message: str


class NotificationClearReadResponse(BaseModel):
    message: str
    deleted_count: int


__all__ = [
    "ContentUpdateBroadcast",
    "ContentUpdateBroadcastResponse",
    "MessageResponse",
    "NotificationClearReadResponse",
    "NotificationCreate",
    "NotificationCreateResponse",
    "NotificationList",
    "NotificationRead",
]

"""Domain entity representing a user notification.

The ``data`` attribute is a tagged union keyed by :class:`NotificationType`:
each notification type carries its own dataclass so producers and consumers
agree on the shape of the extra payload.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Union


class NotificationType(str, Enum):
    """Kinds of notification a user can receive."""

    EDITOR_PROMOTION = "editor_promotion"
    CONTENT_UPDATE = "content_update"
    GROUP_INVITATION = "group_invitation"
    FILE_SHARE = "file_share"


@dataclass(frozen=True)
class EditorPromotionData:
    promoted_by: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ContentUpdateData:
    content_type: str | None = None
    content_id: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GroupInvitationData:
    group_id: int
    group_name: str
    invited_by: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FileShareData:
    file_name: str
    shared_by: str
    extra: dict[str, Any] = field(default_factory=dict)


NotificationData = Union[
    EditorPromotionData, ContentUpdateData, GroupInvitationData, FileShareData
]

_DATA_TYPES: dict[NotificationType, type] = {
    NotificationType.EDITOR_PROMOTION: EditorPromotionData,
    NotificationType.CONTENT_UPDATE: ContentUpdateData,
    NotificationType.GROUP_INVITATION: GroupInvitationData,
    NotificationType.FILE_SHARE: FileShareData,
}


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: int | None
    user_id: int
    type: NotificationType
    title: str
    message: str
    data: NotificationData | None = None
    is_read: bool = False
    created_at: datetime | None = None


def _coerce_content_id(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("content_id must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    raise ValueError("content_id must be an integer")


def parse_notification_data(
    notification_type: NotificationType | str, raw: Mapping[str, Any] | None
) -> NotificationData | None:
    """Build the typed ``data`` value for ``notification_type`` from ``raw``.

    Keys the target type does not name are kept in ``extra`` so the payload
    round-trips unchanged. Raises :class:`ValueError` when ``raw`` is not a
    mapping, misses keys required by the target type or carries a
    ``content_id`` that is not an integer.
    """

    if raw is None:
        return None

    notification_type = NotificationType(notification_type)
    msg = f"Invalid data for notification type '{notification_type.value}'"
    if not isinstance(raw, Mapping):
        raise ValueError(msg)

    data_type = _DATA_TYPES[notification_type]
    known = {name for name in data_type.__dataclass_fields__ if name != "extra"}
    values = {key: value for key, value in raw.items() if key in known}
    extra = {key: value for key, value in raw.items() if key not in known}

    if notification_type is NotificationType.CONTENT_UPDATE:
        try:
            values["content_id"] = _coerce_content_id(values.get("content_id"))
        except ValueError as exc:
            raise ValueError(f"{msg}: {exc}") from exc

    try:
        return data_type(**values, extra=extra)
    except TypeError as exc:
        raise ValueError(msg) from exc


def notification_data_to_dict(data: NotificationData | None) -> dict[str, Any] | None:
    """Return the JSON-friendly representation of ``data``."""

    if data is None:
        return None
    payload = dict(data.extra)
    for name, value in asdict(data).items():
        if name == "extra":
            continue
        if value is None and isinstance(data, ContentUpdateData):
            continue
        payload[name] = value
    return payload


__all__ = [
    "ContentUpdateData",
    "EditorPromotionData",
    "FileShareData",
    "GroupInvitationData",
    "Notification",
    "NotificationData",
    "NotificationType",
    "notification_data_to_dict",
    "parse_notification_data",
]

from .auth import Token
from .notification import (
    ContentUpdateBroadcast,
    ContentUpdateBroadcastResponse,
    MessageResponse,
    NotificationClearReadResponse,
    NotificationCreate,
    NotificationCreateResponse,
    NotificationList,
    NotificationRead,
)
from .user import UserCreate, UserRead

__all__ = [
    "Token",
    "ContentUpdateBroadcast",
    "ContentUpdateBroadcastResponse",
    "MessageResponse",
    "NotificationClearReadResponse",
    "NotificationCreate",
    "NotificationCreateResponse",
    "NotificationList",
    "NotificationRead",
    "UserCreate",
    "UserRead",
]

"""Domain entities exposed by the application."""

from .notification import (
    ContentUpdateData,
    EditorPromotionData,
    FileShareData,
    GroupInvitationData,
    Notification,
    NotificationData,
    NotificationType,
    notification_data_to_dict,
    parse_notification_data,
)
from .user import User

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
    "User",
]

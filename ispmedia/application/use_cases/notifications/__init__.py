"""Public helpers for emitting domain notifications."""

from .events import (
    create_notification,
    notify_content_update,
    notify_editor_promotion,
    notify_file_share,
    notify_group_invitation,
)

__all__ = [
    "create_notification",
    "notify_content_update",
    "notify_editor_promotion",
    "notify_file_share",
    "notify_group_invitation",
]

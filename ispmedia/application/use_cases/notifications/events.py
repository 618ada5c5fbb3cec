"""Utility helpers to persist domain notifications and push them in realtime.

Every helper stores the notification first and only then hands it to the
realtime hub, so users who are offline still find it in their list later.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Mapping

from sqlalchemy.orm import Session

from ispmedia.domain.entities import (
    ContentUpdateData,
    EditorPromotionData,
    FileShareData,
    GroupInvitationData,
    Notification,
    NotificationData,
    NotificationType,
    parse_notification_data,
)
from ispmedia.infrastructure.realtime import RealtimeHub
from ispmedia.infrastructure.repositories import NotificationRepository, UserRepository
from ispmedia.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


def _persist_notification(
    session: Session,
    hub: RealtimeHub,
    *,
    user_id: int,
    notification_type: NotificationType,
    title: str,
    message: str,
    data: NotificationData | None = None,
) -> Notification:
    notification = Notification(
        id=None,
        user_id=user_id,
        type=notification_type,
        title=title,
        message=message,
        data=data,
        is_read=False,
        created_at=now_in_app_timezone(),
    )
    saved = NotificationRepository(session).create(notification)
    hub.notify_user(saved.user_id, saved)
    return saved


def create_notification(
    session: Session,
    hub: RealtimeHub,
    *,
    user_id: int,
    notification_type: NotificationType | str,
    title: str,
    message: str,
    data: Mapping[str, Any] | None = None,
) -> Notification:
    """Persist and push an arbitrary notification for an existing user.

    Raises :class:`LookupError` when ``user_id`` does not exist and
    :class:`ValueError` when ``data`` does not fit ``notification_type``.
    """

    if not UserRepository(session).exists(user_id):
        raise LookupError("Utilizador não encontrado")

    notification_type = NotificationType(notification_type)
    return _persist_notification(
        session,
        hub,
        user_id=user_id,
        notification_type=notification_type,
        title=title,
        message=message,
        data=parse_notification_data(notification_type, data),
    )


def notify_editor_promotion(
    session: Session, hub: RealtimeHub, *, user_id: int, promoted_by: str | None
) -> Notification:
    """Tell a user they can now create and modify catalogue content."""

    return _persist_notification(
        session,
        hub,
        user_id=user_id,
        notification_type=NotificationType.EDITOR_PROMOTION,
        title="Promoção a Editor",
        message="Parabéns! Foi promovido a editor e agora pode criar e modificar conteúdos.",
        data=EditorPromotionData(promoted_by=promoted_by),
    )


def notify_content_update(
    session: Session,
    hub: RealtimeHub,
    *,
    user_ids: Iterable[int],
    title: str,
    message: str,
    content_type: str | None = None,
    content_id: int | None = None,
    extra: Mapping[str, Any] | None = None,
) -> list[Notification]:
    """Store one ``content_update`` notification per recipient and push each."""

    data = ContentUpdateData(
        content_type=content_type, content_id=content_id, extra=dict(extra or {})
    )
    notifications: list[Notification] = []
    seen: set[int] = set()
    for user_id in user_ids:
        if not user_id or user_id in seen:
            continue
        seen.add(user_id)
        notifications.append(
            _persist_notification(
                session,
                hub,
                user_id=user_id,
                notification_type=NotificationType.CONTENT_UPDATE,
                title=title,
                message=message,
                data=data,
            )
        )
    logger.info("Content update '%s' stored for %s users", title, len(notifications))
    return notifications


def notify_group_invitation(
    session: Session,
    hub: RealtimeHub,
    *,
    user_id: int,
    group_id: int,
    group_name: str,
    invited_by: str | None,
) -> Notification:
    """Invite ``user_id`` to a discussion group."""

    return _persist_notification(
        session,
        hub,
        user_id=user_id,
        notification_type=NotificationType.GROUP_INVITATION,
        title="Convite para Grupo",
        message=f'Foi convidado para o grupo "{group_name}"',
        data=GroupInvitationData(
            group_id=group_id, group_name=group_name, invited_by=invited_by
        ),
    )


def notify_file_share(
    session: Session,
    hub: RealtimeHub,
    *,
    user_id: int,
    file_name: str,
    shared_by: str,
) -> Notification:
    """Tell ``user_id`` that someone shared a file with them."""

    return _persist_notification(
        session,
        hub,
        user_id=user_id,
        notification_type=NotificationType.FILE_SHARE,
        title="Ficheiro Partilhado",
        message=f'{shared_by} partilhou o ficheiro "{file_name}" consigo',
        data=FileShareData(file_name=file_name, shared_by=shared_by),
    )


__all__ = [
    "create_notification",
    "notify_content_update",
    "notify_editor_promotion",
    "notify_file_share",
    "notify_group_invitation",
]

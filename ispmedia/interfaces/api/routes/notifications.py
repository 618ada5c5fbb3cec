"""Endpoints for listing, creating and managing user notifications."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ispmedia.application.use_cases.notifications import (
    create_notification as create_notification_uc,
    notify_content_update,
)
from ispmedia.domain.entities import Notification, User
from ispmedia.infrastructure.database import get_db
from ispmedia.infrastructure.realtime import RealtimeHub, serialize_notification
from ispmedia.infrastructure.repositories import NotificationRepository, UserRepository
from ispmedia.interfaces.api.dependencies import (
    get_current_active_user,
    get_realtime_hub,
    require_admin,
    require_editor,
)
from ispmedia.interfaces.api.schemas import (
    ContentUpdateBroadcast,
    ContentUpdateBroadcastResponse,
    MessageResponse,
    NotificationClearReadResponse,
    NotificationCreate,
    NotificationCreateResponse,
    NotificationList,
    NotificationRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)

_NOT_FOUND = "Notificação não encontrada"


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(serialize_notification(notification))


@router.get("/", response_model=NotificationList)
def list_notifications(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    unread_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationList:
    """Devolve as notificações do utilizador, das mais recentes para as mais antigas."""

    repository = NotificationRepository(db)
    notifications = repository.list_for_user(
        current_user.id, limit=limit, offset=offset, unread_only=unread_only
    )
    return NotificationList(
        notifications=[_notification_to_schema(n) for n in notifications],
        unread_count=repository.count_unread(current_user.id),
    )


@router.post(
    "/",
    response_model=NotificationCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    hub: RealtimeHub = Depends(get_realtime_hub),
    _: User = Depends(require_admin),
) -> NotificationCreateResponse:
    """Cria uma notificação para um utilizador e envia-a em tempo real."""

    try:
        notification = create_notification_uc(
            db,
            hub,
            user_id=payload.user_id,
            notification_type=payload.type,
            title=payload.title,
            message=payload.message,
            data=payload.data,
        )
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return NotificationCreateResponse(
        message="Notificação criada com sucesso",
        notification=_notification_to_schema(notification),
    )


@router.post("/content-update", response_model=ContentUpdateBroadcastResponse)
def broadcast_content_update(
    payload: ContentUpdateBroadcast,
    db: Session = Depends(get_db),
    hub: RealtimeHub = Depends(get_realtime_hub),
    current_user: User = Depends(require_editor),
) -> ContentUpdateBroadcastResponse:
    """Anuncia uma alteração de conteúdo aos utilizadores indicados ou a todos os editores."""

    users = UserRepository(db)
    if payload.user_ids is None:
        recipients = [uid for uid in users.list_editor_ids() if uid != current_user.id]
    else:
        recipients = users.list_ids(payload.user_ids)

    notifications = notify_content_update(
        db,
        hub,
        user_ids=recipients,
        title=payload.title,
        message=payload.message,
        content_type=payload.content_type,
        content_id=payload.content_id,
        extra=payload.data,
    )
    return ContentUpdateBroadcastResponse(
        message="Atualização de conteúdo notificada",
        recipients=len(notifications),
    )


@router.put("/read-all", response_model=MessageResponse)
def mark_all_notifications_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    """Marca todas as notificações do utilizador como lidas."""

    NotificationRepository(db).mark_all_as_read(user_id=current_user.id)
    return MessageResponse(message="Todas as notificações foram marcadas como lidas")


@router.delete("/clear-read", response_model=NotificationClearReadResponse)
def clear_read_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationClearReadResponse:
    """Elimina as notificações já lidas do utilizador."""

    deleted = NotificationRepository(db).delete_read(user_id=current_user.id)
    return NotificationClearReadResponse(
        message="Notificações lidas eliminadas com sucesso",
        deleted_count=deleted,
    )


@router.get("/{notification_id}", response_model=NotificationRead)
def read_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationRead:
    notification = NotificationRepository(db).get_for_user(
        notification_id, user_id=current_user.id
    )
    if notification is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    return _notification_to_schema(notification)


@router.put("/{notification_id}/read", response_model=MessageResponse)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    if not NotificationRepository(db).mark_as_read(notification_id, user_id=current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    return MessageResponse(message="Notificação marcada como lida")


@router.delete("/{notification_id}", response_model=MessageResponse)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    if not NotificationRepository(db).delete(notification_id, user_id=current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    logger.info("Notificação %s eliminada pelo utilizador %s", notification_id, current_user.id)
    return MessageResponse(message="Notificação eliminada com sucesso")

"""Rotas para registar utilizadores e gerir os seus privilégios."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ispmedia.application.use_cases.users import (
    create_user as create_user_uc,
    promote_to_editor as promote_to_editor_uc,
)
from ispmedia.domain.entities import User
from ispmedia.infrastructure.database import get_db
from ispmedia.infrastructure.realtime import RealtimeHub
from ispmedia.interfaces.api.dependencies import (
    get_current_active_user,
    get_realtime_hub,
    require_editor,
)
from ispmedia.interfaces.api.schemas import MessageResponse, UserCreate, UserRead

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register_user(user_in: UserCreate, db: Session = Depends(get_db)):
    """Cria uma nova conta de utilizador."""

    try:
        user = create_user_uc(
            db,
            username=user_in.username,
            email=user_in.email,
            password=user_in.password,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    logger.info("Utilizador %s registado", user.username)
    return UserRead.model_validate(user)


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(get_current_active_user)):
    """Devolve a informação do utilizador autenticado."""

    return UserRead.model_validate(current_user)


@router.put("/{user_id}/promote", response_model=MessageResponse)
def promote_user(
    user_id: int,
    db: Session = Depends(get_db),
    hub: RealtimeHub = Depends(get_realtime_hub),
    current_user: User = Depends(require_editor),
):
    """Promove o utilizador a editor e notifica-o em tempo real."""

    try:
        user = promote_to_editor_uc(db, hub, user_id=user_id, promoted_by=current_user)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return MessageResponse(message=f"Utilizador {user.username} promovido a editor com sucesso")

"""Use case for granting editor privileges to a user."""

from dataclasses import replace

from sqlalchemy.orm import Session

from ispmedia.application.use_cases.notifications import notify_editor_promotion
from ispmedia.domain.entities import User
from ispmedia.infrastructure.realtime import RealtimeHub
from ispmedia.infrastructure.repositories import UserRepository

from .get_user import get_user


def promote_to_editor(
    session: Session, hub: RealtimeHub, *, user_id: int, promoted_by: User
) -> User:
    """Promote ``user_id`` to editor and notify them.

    Raises :class:`LookupError` for unknown users and :class:`ValueError` when
    the user already has editor privileges.
    """

    user = get_user(session, user_id)
    if user.is_editor:
        raise ValueError("Utilizador já é editor")

    promoted = UserRepository(session).update(replace(user, is_editor=True))
    notify_editor_promotion(session, hub, user_id=promoted.id, promoted_by=promoted_by.username)
    return promoted

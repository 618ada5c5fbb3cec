"""Use case for retrieving a single user."""

from sqlalchemy.orm import Session

from ispmedia.domain.entities import User
from ispmedia.infrastructure.repositories import UserRepository


def get_user(session: Session, user_id: int) -> User:
    """Return the requested user or raise an error if it does not exist."""

    user = UserRepository(session).get(user_id)
    if user is None:
        raise LookupError("Utilizador não encontrado")
    return user

"""Use case for creating users."""

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.orm import Session

from ispmedia.domain.entities import User
from ispmedia.infrastructure.repositories import UserRepository
from ispmedia.infrastructure.security import get_password_hash
from ispmedia.utils import now_in_app_naive_datetime


def create_user(
    session: Session,
    *,
    username: str,
    email: str,
    password: str,
    is_editor: bool = False,
    is_admin: bool = False,
) -> User:
    """Create a new user ensuring unique usernames and email addresses."""

    repository = UserRepository(session)
    username = username.strip()
    try:
        email = validate_email(email.strip(), check_deliverability=False).normalized.lower()
    except EmailNotValidError as exc:
        raise ValueError(f"Email inválido: {exc}") from exc

    if repository.get_by_login(username) or repository.get_by_login(email):
        raise ValueError("Utilizador ou email já existe")

    user = User(
        id=None,
        username=username,
        email=email,
        password=get_password_hash(password),
        is_editor=is_editor,
        is_admin=is_admin,
        is_active=True,
        created_at=now_in_app_naive_datetime(),
        updated_at=None,
    )
    return repository.create(user)

"""Persistence layer for user data."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ispmedia.domain.entities import User
from ispmedia.infrastructure.models import UserModel
from ispmedia.utils import now_in_app_naive_datetime


class UserRepository:
    """Provide CRUD operations for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = (
            self.session.query(UserModel)
            .filter(func.lower(UserModel.email) == email.strip().lower())
            .first()
        )
        return self._to_entity(model) if model else None

    def get_by_login(self, login: str) -> User | None:
        """Return the user whose username or email matches ``login``."""

        normalized = login.strip().lower()
        model = (
            self.session.query(UserModel)
            .filter(
                or_(
                    func.lower(UserModel.username) == normalized,
                    func.lower(UserModel.email) == normalized,
                )
            )
            .first()
        )
        return self._to_entity(model) if model else None

    def exists(self, user_id: int) -> bool:
        return (
            self.session.query(UserModel.id).filter(UserModel.id == user_id).first()
            is not None
        )

    def list_ids(self, user_ids: Sequence[int]) -> list[int]:
        """Return the subset of ``user_ids`` that belong to existing users."""

        if not user_ids:
            return []
        unique_ids = {int(user_id) for user_id in user_ids}
        query = self.session.query(UserModel.id).filter(UserModel.id.in_(unique_ids))
        return [user_id for (user_id,) in query.all()]

    def list_editor_ids(self) -> list[int]:
        query = (
            self.session.query(UserModel.id)
            .filter(or_(UserModel.is_editor.is_(True), UserModel.is_admin.is_(True)))
            .filter(UserModel.is_active.is_(True))
        )
        return [user_id for (user_id,) in query.all()]

    def create(self, user: User) -> User:
        model = UserModel()
        self._apply_entity_to_model(model, user)
        if user.created_at is not None:
            model.created_at = user.created_at
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, user: User) -> User:
        model = self.session.get(UserModel, user.id)
        if not model:
            msg = f"User with id {user.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, user)
        model.updated_at = now_in_app_naive_datetime()
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _apply_entity_to_model(model: UserModel, user: User) -> None:
        model.username = user.username
        model.email = user.email
        model.password = user.password
        model.is_editor = user.is_editor
        model.is_admin = user.is_admin
        model.is_active = user.is_active

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            username=model.username,
            email=model.email,
            password=model.password,
            is_editor=model.is_editor,
            is_admin=model.is_admin,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


__all__ = ["UserRepository"]

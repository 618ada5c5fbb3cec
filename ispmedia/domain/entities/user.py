"""Domain entity representing a user."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Core attributes describing an application user."""

    id: int | None
    username: str
    email: str
    password: str
    is_editor: bool
    is_admin: bool
    is_active: bool
    created_at: datetime | None
    updated_at: datetime | None

    def can_edit(self) -> bool:
        """Return ``True`` when the user may create or modify catalogue content."""

        return self.is_editor or self.is_admin


__all__ = ["User"]

"""Aggregate application use cases."""

from .users import authenticate_user, create_user, promote_to_editor

__all__ = [
    "authenticate_user",
    "create_user",
    "promote_to_editor",
]

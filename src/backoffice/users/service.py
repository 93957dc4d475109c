from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    username: str
    role: Role


class AuthService:
    """Use case: sign up and authenticate dashboard users."""

    def __init__(self, users: UserRepository):
        self._users = users

    def sign_up(self, *, username: str, email: str, password: str, confirm_password: str, role: str) -> int:
        if not all([username, email, password, confirm_password, role]):
            raise ValidationError("All fields are required")
        username = require_non_empty(username, "Username")
        email = require_non_empty(email, "Email").lower()
        if password != confirm_password:
            raise ValidationError("Passwords do not match")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        try:
            role_enum = Role(role)
        except ValueError:
            raise ValidationError("Invalid role")

        if self._users.get_by_email(email):
            raise ConflictError("User with this email already exists")

        user_id = self._users.create_user(
            username=username,
            email=email,
            password_hash=generate_password_hash(password),
            role=role_enum,
        )
        logger.info("Created %s account %s", role_enum.value, email)
        return user_id

    def authenticate(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return SessionUser(user_id=user.user_id, username=user.username, role=user.role)


class UserService:
    """Use case: manage dashboard users (owner)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_users(self) -> list[dict]:
        return [u.to_public() for u in self._users.list_all()]

    def get_user(self, user_id: int) -> dict:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user.to_public()

    def set_active(self, user_id: int, *, is_active: bool) -> None:
        if not self._users.get_by_id(user_id):
            raise NotFoundError("User not found")
        self._users.set_active(user_id, is_active=is_active)

    def delete_user(self, *, current_user_id: int, user_id: int) -> None:
        if int(current_user_id) == int(user_id):
            raise ValidationError("You cannot delete your own account")
        if not self._users.get_by_id(user_id):
            raise NotFoundError("User not found")
        self._users.delete_by_id(user_id)

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for dashboard accounts.

    Services depend on this protocol, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, *, username: str, email: str, password_hash: str, role: Role) -> int:
        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Dashboard account. Plain data object (no DB access code)."""

    user_id: int
    username: str
    email: str
    password_hash: str
    role: Role
    is_active: bool = True
    created_at: Optional[datetime] = None

    def to_public(self) -> dict:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "email": self.email,
            "role": self.role.value,
            "is_active": self.is_active,
        }

from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, username, email, password_hash, role, is_active, created_at"


def _row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        username=row["username"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        is_active=bool(row.get("is_active", True)),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (user_id,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def create_user(self, *, username: str, email: str, password_hash: str, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(username, email, password_hash, role, is_active)
                VALUES(%s,%s,%s,%s,1)
                """,
                (username, email, password_hash, role.value),
            )
            return int(cur.lastrowid)

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_active=%s WHERE user_id=%s", (1 if is_active else 0, user_id))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (user_id,))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY user_id DESC")
            return [_row_to_user(r) for r in fetchall(cur)]

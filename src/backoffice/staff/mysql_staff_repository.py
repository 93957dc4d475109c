from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import Staff
from .repository import StaffRepository

_COLUMNS = "staff_id, name, designation, salary, active, remaining_advance, last_paid_at, created_at"


def _row_to_staff(r: dict) -> Staff:
    return Staff(
        staff_id=int(r["staff_id"]),
        name=r["name"],
        designation=r["designation"],
        salary=as_float(r["salary"]),
        active=bool(r.get("active", True)),
        remaining_advance=as_float(r.get("remaining_advance")),
        last_paid_at=r.get("last_paid_at"),
        created_at=r.get("created_at"),
    )


class MySQLStaffRepository(StaffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM staff WHERE staff_id=%s", (int(staff_id),))
            r = fetchone(cur)
            return _row_to_staff(r) if r else None

    def get_by_name(self, name: str) -> Optional[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM staff WHERE name=%s", (name,))
            r = fetchone(cur)
            return _row_to_staff(r) if r else None

    def list_all(self, *, active_only: bool = False) -> Sequence[Staff]:
        where = "WHERE active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM staff {where} ORDER BY created_at DESC, staff_id DESC")
            return [_row_to_staff(r) for r in fetchall(cur)]

    def create(self, *, name: str, designation: str, salary: float) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO staff(name, designation, salary) VALUES(%s,%s,%s)",
                (name, designation, salary),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        staff_id: int,
        name: str,
        designation: str,
        salary: float,
        active: bool,
        remaining_advance: float,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE staff
                SET name=%s, designation=%s, salary=%s, active=%s, remaining_advance=%s
                WHERE staff_id=%s
                """,
                (name, designation, salary, 1 if active else 0, remaining_advance, int(staff_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, staff_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM staff WHERE staff_id=%s", (int(staff_id),))
            return cur.rowcount > 0

    def set_balance(self, *, staff_id: int, remaining_advance: float, last_paid_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE staff SET remaining_advance=%s, last_paid_at=%s WHERE staff_id=%s",
                (remaining_advance, last_paid_at, int(staff_id)),
            )
            return cur.rowcount > 0

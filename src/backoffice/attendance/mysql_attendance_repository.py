from __future__ import annotations

from datetime import date
from typing import Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists_for_date(self, work_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM attendance WHERE work_date=%s LIMIT 1", (work_date,))
            return fetchone(cur) is not None

    def insert_many(self, records: Sequence[AttendanceRecord]) -> int:
        if not records:
            return 0
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.executemany(
                    "INSERT INTO attendance(staff_id, work_date, status) VALUES(%s,%s,%s)",
                    [(r.staff_id, r.work_date, r.status.value) for r in records],
                )
        except mysql.connector.IntegrityError:
            # uq_attendance_staff_date: another submission for the day got in first
            raise ConflictError("Attendance for this date has already been submitted.")
        return len(records)

    def list_between(self, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, staff_id, work_date, status
                FROM attendance
                WHERE work_date BETWEEN %s AND %s
                ORDER BY work_date ASC, staff_id ASC
                """,
                (start, end),
            )
            return [
                AttendanceRecord(
                    attendance_id=int(r["attendance_id"]),
                    staff_id=int(r["staff_id"]),
                    work_date=as_date(r["work_date"]),
                    status=AttendanceStatus(r["status"]),
                )
                for r in fetchall(cur)
            ]

    def submitted_dates(self) -> Sequence[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT DISTINCT work_date FROM attendance ORDER BY work_date DESC")
            return [as_date(r["work_date"]) for r in fetchall(cur)]

    def count_present(self, *, staff_id: int, start: date, end: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM attendance
                WHERE staff_id=%s AND status=%s AND work_date BETWEEN %s AND %s
                """,
                (int(staff_id), AttendanceStatus.PRESENT.value, start, end),
            )
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def count_present_by_staff(self, *, start: date, end: date) -> dict[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT staff_id, COUNT(*) AS n
                FROM attendance
                WHERE status=%s AND work_date BETWEEN %s AND %s
                GROUP BY staff_id
                """,
                (AttendanceStatus.PRESENT.value, start, end),
            )
            return {int(r["staff_id"]): int(r["n"]) for r in fetchall(cur)}

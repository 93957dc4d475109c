from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def exists_for_date(self, work_date: date) -> bool:
        raise NotImplementedError

    def insert_many(self, records: Sequence[AttendanceRecord]) -> int:
        raise NotImplementedError

    def list_between(self, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def submitted_dates(self) -> Sequence[date]:
        raise NotImplementedError

    def count_present(self, *, staff_id: int, start: date, end: date) -> int:
        raise NotImplementedError

    def count_present_by_staff(self, *, start: date, end: date) -> dict[int, int]:
        raise NotImplementedError

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from ..common.datetime_utils import format_iso_date, month_bounds, parse_iso_date
from ..common.validators import require_int
from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError, ValidationError
from ..staff.repository import StaffRepository
from .model import AttendanceRecord, SubmitResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, staff: StaffRepository):
        self._attendance = attendance
        self._staff = staff

    def submit_day(self, *, work_date: Any, records: Any) -> SubmitResult:
        """Record one day's attendance sheet.

        A date can be submitted once; a second submission is a conflict and
        writes nothing. Marks for unknown or inactive staff are dropped.
        """
        if not work_date or not isinstance(records, list):
            raise ValidationError("Invalid payload")
        day = parse_iso_date(work_date)

        if self._attendance.exists_for_date(day):
            raise ConflictError("Attendance for this date has already been submitted.")

        active_ids = {s.staff_id for s in self._staff.list_all(active_only=True)}

        seen: set[int] = set()
        entries: list[AttendanceRecord] = []
        for r in records:
            if not isinstance(r, dict):
                raise ValidationError("Invalid payload")
            try:
                staff_id = int(r.get("staff_id", r.get("staff")))
            except (TypeError, ValueError):
                continue
            if staff_id not in active_ids:
                continue
            if staff_id in seen:
                raise ValidationError(f"Staff {staff_id} is listed more than once")
            seen.add(staff_id)
            try:
                status = AttendanceStatus(r.get("status") or AttendanceStatus.PRESENT.value)
            except ValueError:
                raise ValidationError(f"Invalid attendance status: {r.get('status')!r}")
            entries.append(AttendanceRecord(staff_id=staff_id, work_date=day, status=status))

        if not entries:
            raise ValidationError("No valid (active) staff found in submitted records.")

        saved = self._attendance.insert_many(entries)
        result = SubmitResult(saved=saved, skipped=len(records) - len(entries))
        logger.info("Attendance for %s: saved=%s skipped=%s", day, result.saved, result.skipped)
        return result

    def monthly_attendance(self, *, month: Any, year: Any) -> list[dict]:
        if not month or not year:
            raise ValidationError("Month and year are required")
        start, end = month_bounds(require_int(month, "Month"), require_int(year, "Year"))

        present: dict[int, list[str]] = {}
        for rec in self._attendance.list_between(start, end):
            if rec.status == AttendanceStatus.PRESENT:
                present.setdefault(rec.staff_id, []).append(format_iso_date(rec.work_date))

        return [
            {
                "staff_id": s.staff_id,
                "name": s.name,
                "designation": s.designation,
                "present_dates": present.get(s.staff_id, []),
            }
            for s in self._staff.list_all(active_only=True)
        ]

    def submitted_dates(self) -> list[str]:
        return [format_iso_date(d) for d in self._attendance.submitted_dates()]

    def count_present(self, *, staff_id: int, start: date, end: date) -> int:
        return self._attendance.count_present(staff_id=staff_id, start=start, end=end)

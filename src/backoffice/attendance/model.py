from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One staff member's attendance mark for one day."""

    staff_id: int
    work_date: date
    status: AttendanceStatus
    attendance_id: Optional[int] = None


@dataclass(frozen=True)
class SubmitResult:
    saved: int
    skipped: int

    @property
    def message(self) -> str:
        if self.skipped > 0:
            return f"Attendance saved. Skipped {self.skipped} inactive staff."
        return "Attendance saved successfully"

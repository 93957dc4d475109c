from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Dashboard account role used for access control."""

    OWNER = "owner"
    STAFF = "staff"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LEAVE = "Leave"


class SalaryBasis(str, Enum):
    """How salary is attributed to an analytics period."""

    ACCRUAL = "accrual"
    CASH = "cash"


class SettlementKind(str, Enum):
    """Monthly payments are one per staff and month; range payments one per window."""

    MONTHLY = "monthly"
    RANGE = "range"

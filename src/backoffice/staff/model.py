from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Staff:
    """A person on the payroll.

    ``remaining_advance`` is the running balance the staff member owes the shop
    (negative when the shop owes them); it is rewritten on every salary payment.
    """

    staff_id: int
    name: str
    designation: str
    salary: float
    active: bool = True
    remaining_advance: float = 0.0
    last_paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "staff_id": self.staff_id,
            "name": self.name,
            "designation": self.designation,
            "salary": self.salary,
            "active": self.active,
            "remaining_advance": self.remaining_advance,
            "last_paid_at": self.last_paid_at.isoformat() if self.last_paid_at else None,
        }

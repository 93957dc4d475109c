from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import format_iso_date
from ..core.enums import SettlementKind


@dataclass(frozen=True)
class AdjustmentEntry:
    """One owner correction (+/-) to a month's advances."""

    amount: float
    note: str = ""
    at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {"amount": self.amount, "note": self.note, "at": self.at.isoformat() if self.at else None}

    @classmethod
    def from_dict(cls, d: dict) -> "AdjustmentEntry":
        at = d.get("at")
        return cls(
            amount=float(d.get("amount") or 0),
            note=str(d.get("note") or ""),
            at=datetime.fromisoformat(at) if at else None,
        )


@dataclass(frozen=True)
class ConfirmedAdvance:
    """Owner-reviewed advance figure for one staff member and month.

    ``owner_adjustment`` is cumulative; ``history`` keeps the individual deltas.
    """

    staff_id: int
    month: int
    year: int
    system_calculated_advance: float = 0.0
    owner_adjustment: float = 0.0
    confirmed_advance: float = 0.0
    history: tuple[AdjustmentEntry, ...] = ()
    confirmed_at: Optional[datetime] = None
    confirmed_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "confirmed_id": self.confirmed_id,
            "staff_id": self.staff_id,
            "month": self.month,
            "year": self.year,
            "system_calculated_advance": self.system_calculated_advance,
            "owner_adjustment": self.owner_adjustment,
            "confirmed_advance": self.confirmed_advance,
            "history": [h.to_dict() for h in self.history],
            "confirmed_at": self.confirmed_at.isoformat() if self.confirmed_at else None,
        }


@dataclass(frozen=True)
class SalaryPayment:
    staff_id: int
    month: int
    year: int
    attendance_start: date
    attendance_end: date
    paid_at: datetime
    present_days: int = 0
    earned_salary: float = 0.0
    advances: float = 0.0
    owner_adjustment: float = 0.0
    previous_carry_forward: float = 0.0
    payable: float = 0.0
    paid_amount: float = 0.0
    new_carry_forward: float = 0.0
    remaining_advance: float = 0.0
    advance_until: Optional[date] = None
    remark: str = ""
    kind: SettlementKind = SettlementKind.MONTHLY
    payment_id: Optional[int] = None

    @property
    def paid(self) -> bool:
        return self.paid_amount > 0

    @property
    def period_key(self) -> str:
        """Identity of the settled period for one staff member."""
        if self.kind == SettlementKind.RANGE:
            return f"{format_iso_date(self.attendance_start)}..{format_iso_date(self.attendance_end)}"
        return f"{self.year:04d}-{self.month:02d}"

    def to_dict(self) -> dict:
        return {
            "payment_id": self.payment_id,
            "staff_id": self.staff_id,
            "kind": self.kind.value,
            "month": self.month,
            "year": self.year,
            "present_days": self.present_days,
            "earned_salary": self.earned_salary,
            "advances": self.advances,
            "owner_adjustment": self.owner_adjustment,
            "previous_carry_forward": self.previous_carry_forward,
            "payable": self.payable,
            "paid_amount": self.paid_amount,
            "paid": self.paid,
            "new_carry_forward": self.new_carry_forward,
            "remaining_advance": self.remaining_advance,
            "advance_until": format_iso_date(self.advance_until) if self.advance_until else None,
            "attendance_start": format_iso_date(self.attendance_start),
            "attendance_end": format_iso_date(self.attendance_end),
            "remark": self.remark,
            "paid_at": self.paid_at.isoformat(),
        }


@dataclass(frozen=True)
class AdvanceLine:
    """A staff advance found on a daily summary."""

    day: date
    amount: float

    def to_dict(self) -> dict:
        return {"date": format_iso_date(self.day), "amount": self.amount}



@dataclass(frozen=True)
class SalaryBreakdown:
    """Everything a salary settlement for one staff member and month is derived from."""

    staff_id: int
    staff_name: str
    designation: str
    monthly_salary: float
    month: int
    year: int
    attendance_start: date
    attendance_end: date
    advances_start: date
    advances_end: date
    present_days: int
    earned_salary: float
    advance_lines: tuple[AdvanceLine, ...]
    system_advance: float
    owner_adjustment: float
    adjustment_history: tuple[AdjustmentEntry, ...]
    advances: float
    previous_carry_forward: float
    advance_due: float
    payable: float
    saved_payment: Optional[SalaryPayment] = None

    def to_dict(self) -> dict:
        return {
            "staff_id": self.staff_id,
            "staff_name": self.staff_name,
            "designation": self.designation,
            "monthly_salary": self.monthly_salary,
            "month": self.month,
            "year": self.year,
            "attendance_start": format_iso_date(self.attendance_start),
            "attendance_end": format_iso_date(self.attendance_end),
            "advances_start": format_iso_date(self.advances_start),
            "advances_end": format_iso_date(self.advances_end),
            "present_days": self.present_days,
            "earned_salary": self.earned_salary,
            "advance_list": [a.to_dict() for a in self.advance_lines],
            "system_advance": self.system_advance,
            "owner_adjustment": self.owner_adjustment,
            "owner_adjustment_history": [h.to_dict() for h in self.adjustment_history],
            "advances": self.advances,
            "previous_carry_forward": self.previous_carry_forward,
            "advance_due": self.advance_due,
            "payable": self.payable,
            "paid": bool(self.saved_payment and self.saved_payment.paid),
            "saved_payment": self.saved_payment.to_dict() if self.saved_payment else None,
        }

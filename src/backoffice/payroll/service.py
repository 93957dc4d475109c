from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Callable, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_iso_date, month_bounds, months_in_range, now_local, parse_iso_date
from ..common.money import round2, to_amount, total
from ..common.validators import require_int
from ..core.enums import SettlementKind
from ..core.exceptions import NotFoundError, ValidationError
from ..expenses.repository import DailySummaryRepository
from ..staff.model import Staff
from ..staff.repository import StaffRepository
from .calculator.base import SalaryCalculator
from .calculator.standard_calculator import (
    StandardSalaryCalculator,
    carry_forward,
    effective_advances,
    remaining_advance,
)
from .model import AdjustmentEntry, AdvanceLine, ConfirmedAdvance, SalaryBreakdown, SalaryPayment
from .repository import ConfirmedAdvanceRepository, SalaryPaymentRepository

logger = logging.getLogger(__name__)

REMARK_MAX_LENGTH = 255


def _remark(value: Any) -> str:
    remark = str(value or "").strip()
    if len(remark) > REMARK_MAX_LENGTH:
        raise ValidationError(f"Remark must be at most {REMARK_MAX_LENGTH} characters")
    return remark


class PayrollService:
    """Use case: salary settlement against attendance and cashier advances (owner)."""

    def __init__(
        self,
        *,
        staff: StaffRepository,
        attendance: AttendanceRepository,
        summaries: DailySummaryRepository,
        payments: SalaryPaymentRepository,
        confirmed: ConfirmedAdvanceRepository,
        calculator: Optional[SalaryCalculator] = None,
        clock: Callable = now_local,
    ):
        self._staff = staff
        self._attendance = attendance
        self._summaries = summaries
        self._payments = payments
        self._confirmed = confirmed
        self._calculator = calculator or StandardSalaryCalculator()
        self._clock = clock

    # --- helpers -----------------------------------------------------------

    def _period(self, month: Any, year: Any) -> tuple[int, int]:
        today = self._clock()
        m = require_int(month, "Month") if month not in (None, "") else today.month
        y = require_int(year, "Year") if year not in (None, "") else today.year
        month_bounds(m, y)
        return m, y

    def _get_staff(self, staff_id: Any) -> Staff:
        staff = self._staff.get_by_id(require_int(staff_id, "Staff"))
        if not staff:
            raise NotFoundError("Staff not found")
        return staff

    def _advance_lines(self, staff_id: int, start: date, end: date) -> list[AdvanceLine]:
        lines: list[AdvanceLine] = []
        for summary in self._summaries.list_between(start, end):
            for adv in summary.iter_staff_advances():
                if adv.staff_id == staff_id:
                    lines.append(AdvanceLine(day=summary.summary_date, amount=adv.amount))
        return lines

    def _advances_by_staff(self, start: date, end: date) -> dict[int, dict[str, list[float]]]:
        out: dict[int, dict[str, list[float]]] = {}
        for summary in self._summaries.list_between(start, end):
            day = format_iso_date(summary.summary_date)
            for adv in summary.iter_staff_advances():
                out.setdefault(adv.staff_id, {}).setdefault(day, []).append(adv.amount)
        return out

    @staticmethod
    def _optional_date(value: Any, field_name: str) -> Optional[date]:
        if value in (None, ""):
            return None
        return parse_iso_date(value, field_name)

    def _range(self, start: Any, end: Any) -> tuple[date, date]:
        if not start or not end:
            raise ValidationError("Start and end are required")
        start_d = parse_iso_date(start, "start")
        end_d = parse_iso_date(end, "end")
        if end_d < start_d:
            raise ValidationError("End date must not be before start date")
        return start_d, end_d

    # --- monthly settlement ------------------------------------------------

    def _breakdown(
        self,
        *,
        staff_id: Any,
        month: Any,
        year: Any,
        start: Any = None,
        end: Any = None,
        advance_until: Optional[date] = None,
    ) -> SalaryBreakdown:
        m, y = self._period(month, year)
        month_start, month_end = month_bounds(m, y)

        start_d = self._optional_date(start, "start")
        end_d = self._optional_date(end, "end")
        attendance_start = start_d or month_start
        attendance_end = end_d or month_end
        if attendance_end < attendance_start:
            raise ValidationError("Attendance end date is before start date.")

        cutoff = advance_until or month_end
        if start_d:
            advances_start = start_d
        elif cutoff <= month_end:
            advances_start = month_start
        else:
            advances_start = month_end + timedelta(days=1)

        staff = self._get_staff(staff_id)

        # Advances already settled by an earlier period are not counted twice.
        last = self._payments.last_before(staff_id=staff.staff_id, month=m, year=y)
        if last and last.advance_until:
            advances_start = max(advances_start, last.advance_until + timedelta(days=1))
        if cutoff < advances_start:
            raise ValidationError("Advances end date is before start date.")

        present_days = self._attendance.count_present(
            staff_id=staff.staff_id, start=attendance_start, end=attendance_end
        )
        lines = self._advance_lines(staff.staff_id, advances_start, cutoff)
        system_advance = total(a.amount for a in lines)

        confirmed = self._confirmed.get(staff_id=staff.staff_id, month=m, year=y)
        owner_adjustment = confirmed.owner_adjustment if confirmed else 0.0
        history = tuple(sorted(confirmed.history, key=lambda h: h.at or datetime.min)) if confirmed else ()

        advances = effective_advances(system_advance, owner_adjustment)
        earned = self._calculator.earned(monthly_salary=staff.salary, present_days=present_days, month=m, year=y)

        saved = self._payments.get(staff_id=staff.staff_id, month=m, year=y)
        # Paying the same period again settles against the balance it started from.
        previous = saved.previous_carry_forward if saved else round2(staff.remaining_advance)
        due = round2(previous + advances)

        return SalaryBreakdown(
            staff_id=staff.staff_id,
            staff_name=staff.name,
            designation=staff.designation,
            monthly_salary=staff.salary,
            month=m,
            year=y,
            attendance_start=attendance_start,
            attendance_end=attendance_end,
            advances_start=advances_start,
            advances_end=cutoff,
            present_days=present_days,
            earned_salary=earned,
            advance_lines=tuple(lines),
            system_advance=system_advance,
            owner_adjustment=owner_adjustment,
            adjustment_history=history,
            advances=advances,
            previous_carry_forward=previous,
            advance_due=due,
            payable=self._calculator.monthly_payable(
                earned=earned, advances=advances, previous_carry_forward=previous
            ),
            saved_payment=saved,
        )

    def preview(
        self,
        staff_id: Any,
        *,
        month: Any = None,
        year: Any = None,
        start: Any = None,
        end: Any = None,
        advance_until: Any = None,
    ) -> SalaryBreakdown:
        return self._breakdown(
            staff_id=staff_id,
            month=month,
            year=year,
            start=start,
            end=end,
            advance_until=self._optional_date(advance_until, "advance_until"),
        )

    def pay_salary(
        self,
        *,
        staff_id: Any,
        month: Any,
        year: Any,
        paid_amount: Any,
        advance_until: Any,
        remark: Any = "",
        start: Any = None,
        end: Any = None,
    ) -> SalaryPayment:
        if not advance_until:
            raise ValidationError("Please provide 'advance_until'.")
        cutoff = parse_iso_date(advance_until, "advance_until")

        b = self._breakdown(staff_id=staff_id, month=month, year=year, start=start, end=end, advance_until=cutoff)
        paid = round2(max(0.0, to_amount(paid_amount)))
        now = self._clock()

        payment = self._payments.upsert(
            SalaryPayment(
                staff_id=b.staff_id,
                month=b.month,
                year=b.year,
                present_days=b.present_days,
                earned_salary=b.earned_salary,
                advances=b.advances,
                owner_adjustment=b.owner_adjustment,
                previous_carry_forward=b.previous_carry_forward,
                payable=b.payable,
                paid_amount=paid,
                new_carry_forward=carry_forward(b.payable, paid),
                remaining_advance=remaining_advance(advance_due=b.advance_due, paid=paid, earned=b.earned_salary),
                advance_until=cutoff,
                attendance_start=b.attendance_start,
                attendance_end=b.attendance_end,
                remark=_remark(remark),
                paid_at=now,
            )
        )
        self._staff.set_balance(staff_id=b.staff_id, remaining_advance=payment.remaining_advance, last_paid_at=now)
        logger.info(
            "Salary paid: staff=%s period=%s/%s paid=%.2f remaining=%.2f",
            b.staff_id, b.month, b.year, paid, payment.remaining_advance,
        )
        return payment

    # --- range settlement --------------------------------------------------

    def _owner_adjustment_for_range(self, staff_id: int, start: date, end: date) -> float:
        adjustments = []
        for m, y in months_in_range(start, end):
            confirmed = self._confirmed.get(staff_id=staff_id, month=m, year=y)
            if confirmed:
                adjustments.append(confirmed.owner_adjustment)
        return total(adjustments)

    def prepare_range(self, *, start: Any, end: Any) -> list[dict]:
        """Per staff figures for a custom attendance window (no month boundary)."""
        start_d, end_d = self._range(start, end)
        present = self._attendance.count_present_by_staff(start=start_d, end=end_d)
        advances = self._advances_by_staff(start_d, end_d)
        saved = {
            p.staff_id: p
            for p in self._payments.list_for_window(start=start_d, end=end_d)
            if p.kind == SettlementKind.RANGE
        }

        rows = []
        for staff in self._staff.list_all():
            by_date = advances.get(staff.staff_id, {})
            total_advance = total(a for amounts in by_date.values() for a in amounts)
            present_days = present.get(staff.staff_id, 0)
            earned = self._calculator.earned(
                monthly_salary=staff.salary, present_days=present_days, month=start_d.month, year=start_d.year
            )
            owner_adjustment = self._owner_adjustment_for_range(staff.staff_id, start_d, end_d)
            payment = saved.get(staff.staff_id)
            previous = payment.previous_carry_forward if payment else round2(staff.remaining_advance)
            rows.append(
                {
                    "staff_id": staff.staff_id,
                    "name": staff.name,
                    "salary": staff.salary,
                    "present_days": present_days,
                    "earned_salary": earned,
                    "advances_by_date": by_date,
                    "total_advance": total_advance,
                    "owner_adjustment": owner_adjustment,
                    "previous_carry_forward": previous,
                    "payable": self._calculator.range_payable(
                        earned=earned,
                        advances=total_advance,
                        owner_adjust=owner_adjustment,
                        previous_carry_forward=previous,
                    ),
                }
            )
        return rows

    def pay_range(self, *, staff_id: Any, start: Any, end: Any, owner_adjust: Any, paid_amount: Any) -> SalaryPayment:
        start_d, end_d = self._range(start, end)
        staff = self._get_staff(staff_id)
        month, year = start_d.month, start_d.year

        present_days = self._attendance.count_present(staff_id=staff.staff_id, start=start_d, end=end_d)
        earned = self._calculator.earned(monthly_salary=staff.salary, present_days=present_days, month=month, year=year)
        advances = total(a.amount for a in self._advance_lines(staff.staff_id, start_d, end_d))
        adjust = round2(to_amount(owner_adjust))
        paid = round2(max(0.0, to_amount(paid_amount)))

        # Re-paying a window settles against the balance that window started from;
        # a new window starts from the staff balance left by the last payment.
        saved = self._payments.get_for_window(staff_id=staff.staff_id, start=start_d, end=end_d)
        previous = saved.previous_carry_forward if saved else round2(staff.remaining_advance)
        payable = self._calculator.range_payable(
            earned=earned, advances=advances, owner_adjust=adjust, previous_carry_forward=previous
        )
        now = self._clock()

        payment = self._payments.upsert(
            SalaryPayment(
                staff_id=staff.staff_id,
                month=month,
                year=year,
                present_days=present_days,
                earned_salary=earned,
                advances=advances,
                owner_adjustment=adjust,
                previous_carry_forward=previous,
                payable=payable,
                paid_amount=paid,
                new_carry_forward=carry_forward(payable, paid),
                remaining_advance=remaining_advance(
                    advance_due=round2(previous + advances - adjust), paid=paid, earned=earned
                ),
                advance_until=end_d,
                attendance_start=start_d,
                attendance_end=end_d,
                paid_at=now,
                kind=SettlementKind.RANGE,
            )
        )
        self._staff.set_balance(staff_id=staff.staff_id, remaining_advance=payment.remaining_advance, last_paid_at=now)
        logger.info(
            "Range salary paid: staff=%s window=%s..%s paid=%.2f",
            staff.staff_id, format_iso_date(start_d), format_iso_date(end_d), paid,
        )
        return payment

    def range_history(self, *, start: Any, end: Any) -> list[dict]:
        start_d, end_d = self._range(start, end)
        names = {s.staff_id: s.name for s in self._staff.list_all()}
        out = []
        for p in self._payments.list_for_window(start=start_d, end=end_d):
            row = p.to_dict()
            row["staff_name"] = names.get(p.staff_id, "")
            out.append(row)
        return out

    # --- advances ----------------------------------------------------------

    def staff_with_advances(self, *, month: Any, year: Any) -> list[dict]:
        m, y = self._period(month, year)
        first, last = month_bounds(m, y)
        advances = self._advances_by_staff(first, last)
        return [
            {
                "staff_id": s.staff_id,
                "name": s.name,
                "designation": s.designation,
                "total_advance": total(a for amounts in advances.get(s.staff_id, {}).values() for a in amounts),
            }
            for s in self._staff.list_all()
        ]

    def staff_advances(self, staff_id: Any, *, month: Any, year: Any) -> dict:
        staff = self._get_staff(staff_id)
        m, y = self._period(month, year)
        first, last = month_bounds(m, y)
        lines = self._advance_lines(staff.staff_id, first, last)
        return {
            "staff_id": staff.staff_id,
            "name": staff.name,
            "month": m,
            "year": y,
            "advances": [a.to_dict() for a in lines],
            "total_advance": total(a.amount for a in lines),
        }

    def confirm_advance(
        self,
        *,
        staff_id: Any,
        month: Any,
        year: Any,
        system_calculated_advance: Any,
        owner_adjustment_delta: Any = 0,
        note: Any = "",
    ) -> ConfirmedAdvance:
        """Record the owner's review of a month's advances.

        The delta is added to the running adjustment; each non-zero delta (or any
        note) is kept in the history.
        """
        staff = self._get_staff(staff_id)
        m, y = self._period(month, year)
        system = round2(to_amount(system_calculated_advance))
        delta = round2(to_amount(owner_adjustment_delta))
        note = str(note or "").strip()
        now = self._clock()

        existing = self._confirmed.get(staff_id=staff.staff_id, month=m, year=y)
        adjustment = round2((existing.owner_adjustment if existing else 0.0) + delta)
        history = existing.history if existing else ()
        if delta != 0 or note:
            history = history + (AdjustmentEntry(amount=delta, note=note, at=now),)

        record = self._confirmed.upsert(
            ConfirmedAdvance(
                confirmed_id=existing.confirmed_id if existing else None,
                staff_id=staff.staff_id,
                month=m,
                year=y,
                system_calculated_advance=system,
                owner_adjustment=adjustment,
                confirmed_advance=effective_advances(system, adjustment),
                history=history,
                confirmed_at=now,
            )
        )
        logger.info("Advance confirmed: staff=%s period=%s/%s adjustment=%.2f", staff.staff_id, m, y, adjustment)
        return record

    def list_confirmed(self, *, month: Any = None, year: Any = None) -> list[ConfirmedAdvance]:
        m = require_int(month, "Month") if month not in (None, "") else None
        y = require_int(year, "Year") if year not in (None, "") else None
        return list(self._confirmed.list_all(month=m, year=y))

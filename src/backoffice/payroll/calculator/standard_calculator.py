from __future__ import annotations

from ...common.datetime_utils import days_in_month
from ...common.money import round2
from .base import SalaryCalculator


def effective_advances(system_advance: float, owner_adjustment: float) -> float:
    """System advances corrected by the owner, never below zero."""
    return round2(max(0.0, system_advance + owner_adjustment))


def carry_forward(payable: float, paid: float) -> float:
    return round2(payable - paid)


def remaining_advance(*, advance_due: float, paid: float, earned: float) -> float:
    """Balance the staff member still owes after a payment (negative: the shop owes)."""
    return round2(advance_due + paid - earned)


class StandardSalaryCalculator(SalaryCalculator):
    """Standard rule: salary / days in month * present days, minus what is owed."""

    def earned(self, *, monthly_salary: float, present_days: int, month: int, year: int) -> float:
        per_day = float(monthly_salary or 0) / days_in_month(month, year)
        return round2(per_day * max(int(present_days), 0))

    def monthly_payable(self, *, earned: float, advances: float, previous_carry_forward: float) -> float:
        return round2(max(0.0, earned - (previous_carry_forward + advances)))

    def range_payable(
        self, *, earned: float, advances: float, owner_adjust: float, previous_carry_forward: float
    ) -> float:
        return round2(earned - advances + owner_adjust - previous_carry_forward)

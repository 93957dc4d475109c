from __future__ import annotations

from datetime import datetime, time
from typing import Any, Callable

from ..common.datetime_utils import format_iso_date, months_in_range, now_local, parse_iso_date
from ..common.money import round2, total
from ..core.enums import SalaryBasis
from ..core.exceptions import ValidationError
from ..expenses.repository import DailySummaryRepository
from ..payroll.repository import SalaryPaymentRepository


class AnalyticsService:
    """Owner dashboard figures.

    Revenue is split so that revenue = salary + other expenses + profit, where
    profit is the sum of daily payouts and "other" is whatever remains.
    """

    def __init__(
        self,
        summaries: DailySummaryRepository,
        payments: SalaryPaymentRepository,
        *,
        clock: Callable = now_local,
    ):
        self._summaries = summaries
        self._payments = payments
        self._clock = clock

    def pie(self, *, start: Any = None, end: Any = None, basis: Any = None) -> dict:
        today = self._clock().date()
        start_d = parse_iso_date(start, "start") if start else today.replace(day=1)
        end_d = parse_iso_date(end, "end") if end else today
        if end_d < start_d:
            raise ValidationError("End date must not be before start date")
        try:
            basis_v = SalaryBasis(str(basis or SalaryBasis.ACCRUAL.value).lower())
        except ValueError:
            raise ValidationError("Basis must be 'accrual' or 'cash'")

        summaries = self._summaries.list_between(start_d, end_d)
        revenue = total(s.total_cashier_sale for s in summaries)
        profit = total(s.payout for s in summaries)
        cashier_expenses = total(s.total_cashier_expenses for s in summaries)

        if basis_v is SalaryBasis.CASH:
            payments = self._payments.list_paid_between(
                start=datetime.combine(start_d, time.min), end=datetime.combine(end_d, time.max)
            )
        else:
            payments = self._payments.list_for_periods(months_in_range(start_d, end_d))
        salary = total(p.paid_amount for p in payments)

        other = round2(revenue - salary - profit)
        cashiers_portion = round2(max(0.0, min(other, cashier_expenses)))
        adjustments = round2(max(0.0, other - cashiers_portion))

        return {
            "start": format_iso_date(start_d),
            "end": format_iso_date(end_d),
            "basis": basis_v.value,
            "revenue": revenue,
            "salary_paid": salary,
            "profit": profit,
            "expenses_total": round2(salary + other),
            "other_expenses": other,
            "other_breakdown": [
                {"name": "Cashier Expenses (excl. drinks)", "value": cashiers_portion},
                {"name": "Adjustments", "value": adjustments},
            ],
            "pie": [
                {"name": "Staff Salary", "value": salary},
                {"name": "Other Expenses", "value": other},
                {"name": "Profit" if profit >= 0 else "Loss", "value": abs(profit)},
            ],
        }

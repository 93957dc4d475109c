from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import ConfirmedAdvance, SalaryPayment


class SalaryPaymentRepository(Protocol):
    def get(self, *, staff_id: int, month: int, year: int) -> Optional[SalaryPayment]:
        """The monthly payment of (staff, month, year)."""

        raise NotImplementedError

    def get_for_window(self, *, staff_id: int, start: date, end: date) -> Optional[SalaryPayment]:
        """The range payment recorded for exactly this attendance window."""

        raise NotImplementedError

    def upsert(self, payment: SalaryPayment) -> SalaryPayment:
        """Insert or replace the payment of (staff, kind, period_key)."""

        raise NotImplementedError

    def last_before(self, *, staff_id: int, month: int, year: int) -> Optional[SalaryPayment]:
        """Latest payment for a period strictly earlier than (month, year)."""

        raise NotImplementedError

    def list_for_window(self, *, start: date, end: date) -> Sequence[SalaryPayment]:
        raise NotImplementedError

    def list_for_periods(self, periods: Sequence[tuple[int, int]]) -> Sequence[SalaryPayment]:
        raise NotImplementedError

    def list_paid_between(self, *, start: datetime, end: datetime) -> Sequence[SalaryPayment]:
        raise NotImplementedError


class ConfirmedAdvanceRepository(Protocol):
    def get(self, *, staff_id: int, month: int, year: int) -> Optional[ConfirmedAdvance]:
        raise NotImplementedError

    def upsert(self, record: ConfirmedAdvance) -> ConfirmedAdvance:
        raise NotImplementedError

    def list_all(self, *, month: Optional[int] = None, year: Optional[int] = None) -> Sequence[ConfirmedAdvance]:
        raise NotImplementedError

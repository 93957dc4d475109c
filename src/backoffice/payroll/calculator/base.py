from __future__ import annotations

from abc import ABC, abstractmethod


class SalaryCalculator(ABC):
    """Calculator interface (Strategy Pattern for salary settlement)."""

    @abstractmethod
    def earned(self, *, monthly_salary: float, present_days: int, month: int, year: int) -> float:
        raise NotImplementedError

    @abstractmethod
    def monthly_payable(self, *, earned: float, advances: float, previous_carry_forward: float) -> float:
        raise NotImplementedError

    @abstractmethod
    def range_payable(
        self, *, earned: float, advances: float, owner_adjust: float, previous_carry_forward: float
    ) -> float:
        raise NotImplementedError

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Staff


class StaffRepository(Protocol):
    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Staff]:
        raise NotImplementedError

    def list_all(self, *, active_only: bool = False) -> Sequence[Staff]:
        raise NotImplementedError

    def create(self, *, name: str, designation: str, salary: float) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        staff_id: int,
        name: str,
        designation: str,
        salary: float,
        active: bool,
        remaining_advance: float,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, staff_id: int) -> bool:
        raise NotImplementedError

    def set_balance(self, *, staff_id: int, remaining_advance: float, last_paid_at: datetime) -> bool:
        """Mirror the carry-forward of a salary payment onto the staff record."""

        raise NotImplementedError

from __future__ import annotations

from typing import Any

from ..common.money import round2, to_amount
from ..common.validators import parse_bool, require_non_empty, require_number
from ..core.exceptions import ConflictError, NotFoundError
from .model import Staff
from .repository import StaffRepository


class StaffService:
    """Use case: staff registry (owner)."""

    def __init__(self, staff: StaffRepository):
        self._staff = staff

    def create_staff(self, *, name: Any, designation: Any, salary: Any) -> int:
        name = require_non_empty(name, "Name")
        designation = require_non_empty(designation, "Designation")
        salary = require_number(salary, "Salary", minimum=0)

        if self._staff.get_by_name(name):
            raise ConflictError("Staff with this name already exists")

        return self._staff.create(name=name, designation=designation, salary=round2(salary))

    def get_staff(self, staff_id: int) -> Staff:
        staff = self._staff.get_by_id(staff_id)
        if not staff:
            raise NotFoundError("Staff not found")
        return staff

    def list_staff(self, *, active_only: bool = False) -> list[Staff]:
        return list(self._staff.list_all(active_only=active_only))

    def list_for_form(self) -> list[dict]:
        """Active staff as id/name pairs for the cashier advance picker."""
        return [{"id": s.staff_id, "name": s.name} for s in self._staff.list_all(active_only=True)]

    def update_staff(
        self,
        staff_id: int,
        *,
        name: Any,
        designation: Any,
        salary: Any,
        active: Any = None,
        remaining_advance: Any = None,
    ) -> Staff:
        current = self.get_staff(staff_id)
        name = require_non_empty(name, "Name")
        designation = require_non_empty(designation, "Designation")
        salary = require_number(salary, "Salary", minimum=0)

        clash = self._staff.get_by_name(name)
        if clash and clash.staff_id != current.staff_id:
            raise ConflictError("Another staff with this name already exists")

        self._staff.update(
            staff_id=current.staff_id,
            name=name,
            designation=designation,
            salary=round2(salary),
            active=current.active if active is None else parse_bool(active, "Active"),
            remaining_advance=(
                current.remaining_advance if remaining_advance is None else round2(to_amount(remaining_advance))
            ),
        )
        return self.get_staff(current.staff_id)

    def delete_staff(self, staff_id: int) -> None:
        self.get_staff(staff_id)
        self._staff.delete_by_id(staff_id)

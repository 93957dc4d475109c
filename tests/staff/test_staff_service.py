import pytest

from backoffice.core.exceptions import ConflictError, NotFoundError, ValidationError
from backoffice.staff.service import StaffService


@pytest.fixture
def service(staff_repo):
    return StaffService(staff_repo)


def test_create_and_list(service, staff_repo):
    staff_id = service.create_staff(name=" Ravi ", designation="Cashier", salary=3000)

    assert staff_repo.get_by_id(staff_id).name == "Ravi"
    assert service.list_for_form() == [{"id": staff_id, "name": "Ravi"}]


def test_duplicate_name_conflicts(service):
    service.create_staff(name="Ravi", designation="Cashier", salary=3000)
    with pytest.raises(ConflictError):
        service.create_staff(name="Ravi", designation="Cook", salary=2000)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(name="", designation="Cashier", salary=100),
        dict(name="A", designation=" ", salary=100),
        dict(name="A", designation="Cashier", salary="100"),
        dict(name="A", designation="Cashier", salary=True),
        dict(name="A", designation="Cashier", salary=-1),
        dict(name="A", designation="Cashier", salary=float("nan")),
        dict(name="A", designation="Cashier", salary=float("inf")),
    ],
)
def test_invalid_staff_fields(service, kwargs):
    with pytest.raises(ValidationError):
        service.create_staff(**kwargs)


def test_update_keeps_balance_unless_given(service, staff_repo):
    s = staff_repo.add("Ravi", remaining_advance=120.0)

    updated = service.update_staff(s.staff_id, name="Ravi K", designation="Head cashier", salary=3500)
    assert updated.remaining_advance == 120.0
    assert updated.salary == 3500.0

    updated = service.update_staff(
        s.staff_id, name="Ravi K", designation="Head cashier", salary=3500, active=False, remaining_advance="0"
    )
    assert updated.remaining_advance == 0.0
    assert updated.active is False
    assert service.list_for_form() == []


@pytest.mark.parametrize("raw, expected", [("false", False), ("0", False), ("true", True), (1, True), (False, False)])
def test_update_parses_active_flag(service, staff_repo, raw, expected):
    s = staff_repo.add("Ravi", active=not expected)
    updated = service.update_staff(s.staff_id, name="Ravi", designation="Cashier", salary=100, active=raw)
    assert updated.active is expected


def test_update_rejects_unreadable_active_flag(service, staff_repo):
    s = staff_repo.add("Ravi")
    with pytest.raises(ValidationError):
        service.update_staff(s.staff_id, name="Ravi", designation="Cashier", salary=100, active="maybe")
    assert staff_repo.get_by_id(s.staff_id).active is True


def test_update_rejects_name_clash(service, staff_repo):
    staff_repo.add("A")
    b = staff_repo.add("B")
    with pytest.raises(ConflictError):
        service.update_staff(b.staff_id, name="A", designation="Cashier", salary=100)


def test_missing_staff(service):
    with pytest.raises(NotFoundError):
        service.get_staff(42)
    with pytest.raises(NotFoundError):
        service.delete_staff(42)

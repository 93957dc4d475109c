from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest
from werkzeug.security import generate_password_hash

from backoffice.analytics.service import AnalyticsService
from backoffice.attendance.model import AttendanceRecord
from backoffice.attendance.service import AttendanceService
from backoffice.container import Container
from backoffice.core.enums import AttendanceStatus, Role, SettlementKind
from backoffice.core.exceptions import ConflictError
from backoffice.expenses.service import ExpenseService
from backoffice.ocr.client import AzureReadClient
from backoffice.payroll.service import PayrollService
from backoffice.proofs.service import ProofService
from backoffice.proofs.storage import LocalProofStorage
from backoffice.staff.model import Staff
from backoffice.staff.service import StaffService
from backoffice.users.model import User
from backoffice.users.service import AuthService, UserService

FIXED_NOW = datetime(2025, 3, 15, 10, 30, 0)


def fixed_clock():
    return FIXED_NOW


class FakeUserRepo:
    def __init__(self):
        self._next_id = 1
        self.users: dict[int, User] = {}

    def add(self, *, username, email, password, role=Role.STAFF, is_active=True) -> User:
        user = User(
            user_id=self._next_id,
            username=username,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            is_active=is_active,
        )
        self.users[user.user_id] = user
        self._next_id += 1
        return user

    def get_by_id(self, user_id):
        return self.users.get(int(user_id))

    def get_by_email(self, email):
        return next((u for u in self.users.values() if u.email == email), None)

    def create_user(self, *, username, email, password_hash, role):
        uid = self._next_id
        self._next_id += 1
        self.users[uid] = User(user_id=uid, username=username, email=email, password_hash=password_hash, role=role)
        return uid

    def set_active(self, user_id, *, is_active):
        self.users[int(user_id)] = replace(self.users[int(user_id)], is_active=is_active)
        return True

    def delete_by_id(self, user_id):
        return self.users.pop(int(user_id), None) is not None

    def list_all(self):
        return list(self.users.values())


class FakeStaffRepo:
    def __init__(self):
        self._next_id = 1
        self.staff: dict[int, Staff] = {}

    def add(self, name, *, salary=3000.0, designation="Cashier", active=True, remaining_advance=0.0) -> Staff:
        s = Staff(
            staff_id=self._next_id,
            name=name,
            designation=designation,
            salary=salary,
            active=active,
            remaining_advance=remaining_advance,
        )
        self.staff[s.staff_id] = s
        self._next_id += 1
        return s

    def get_by_id(self, staff_id):
        return self.staff.get(int(staff_id))

    def get_by_name(self, name):
        return next((s for s in self.staff.values() if s.name == name), None)

    def list_all(self, *, active_only=False):
        return [s for s in self.staff.values() if s.active or not active_only]

    def create(self, *, name, designation, salary):
        return self.add(name, salary=salary, designation=designation).staff_id

    def update(self, *, staff_id, name, designation, salary, active, remaining_advance):
        self.staff[staff_id] = replace(
            self.staff[staff_id],
            name=name,
            designation=designation,
            salary=salary,
            active=active,
            remaining_advance=remaining_advance,
        )
        return True

    def delete_by_id(self, staff_id):
        return self.staff.pop(int(staff_id), None) is not None

    def set_balance(self, *, staff_id, remaining_advance, last_paid_at):
        self.staff[staff_id] = replace(self.staff[staff_id], remaining_advance=remaining_advance, last_paid_at=last_paid_at)
        return True


class FakeAttendanceRepo:
    def __init__(self):
        self.records: list[AttendanceRecord] = []

    def mark_present(self, staff_id, *days: date) -> None:
        for d in days:
            self.records.append(AttendanceRecord(staff_id=staff_id, work_date=d, status=AttendanceStatus.PRESENT))

    def exists_for_date(self, work_date):
        return any(r.work_date == work_date for r in self.records)

    def insert_many(self, records):
        taken = {(r.staff_id, r.work_date) for r in self.records}
        if any((r.staff_id, r.work_date) in taken for r in records):
            raise ConflictError("Attendance for this date has already been submitted.")
        self.records.extend(records)
        return len(records)

    def list_between(self, start, end):
        return [r for r in self.records if start <= r.work_date <= end]

    def submitted_dates(self):
        return sorted({r.work_date for r in self.records}, reverse=True)

    def count_present(self, *, staff_id, start, end):
        return sum(
            1
            for r in self.records
            if r.staff_id == staff_id and r.status == AttendanceStatus.PRESENT and start <= r.work_date <= end
        )

    def count_present_by_staff(self, *, start, end):
        out: dict[int, int] = {}
        for r in self.list_between(start, end):
            if r.status == AttendanceStatus.PRESENT:
                out[r.staff_id] = out.get(r.staff_id, 0) + 1
        return out


class FakeSummaryRepo:
    def __init__(self):
        self.summaries = {}
        self.upserts = 0

    def get(self, summary_date):
        return self.summaries.get(summary_date)

    def upsert(self, summary):
        self.upserts += 1
        self.summaries[summary.summary_date] = summary

    def exists(self, summary_date):
        return summary_date in self.summaries

    def list_dates(self):
        return sorted(self.summaries, reverse=True)

    def list_between(self, start, end):
        return [self.summaries[d] for d in sorted(self.summaries) if start <= d <= end]


class FakePaymentRepo:
    def __init__(self):
        self._next_id = 1
        self.payments = {}

    def get(self, *, staff_id, month, year):
        return self.payments.get((staff_id, SettlementKind.MONTHLY, f"{year:04d}-{month:02d}"))

    def get_for_window(self, *, staff_id, start, end):
        return self.payments.get((staff_id, SettlementKind.RANGE, f"{start.isoformat()}..{end.isoformat()}"))

    def upsert(self, payment):
        key = (payment.staff_id, payment.kind, payment.period_key)
        existing = self.payments.get(key)
        if existing:
            payment = replace(payment, payment_id=existing.payment_id)
        else:
            payment = replace(payment, payment_id=self._next_id)
            self._next_id += 1
        self.payments[key] = payment
        return payment

    def last_before(self, *, staff_id, month, year):
        earlier = [p for p in self.payments.values() if p.staff_id == staff_id and (p.year, p.month) < (year, month)]
        return max(earlier, key=lambda p: (p.year, p.month, p.advance_until or date.min), default=None)

    def list_for_window(self, *, start, end):
        return [p for p in self.payments.values() if p.attendance_start == start and p.attendance_end == end]

    def list_for_periods(self, periods):
        wanted = set(periods)
        return [p for p in self.payments.values() if (p.month, p.year) in wanted]

    def list_paid_between(self, *, start, end):
        return [p for p in self.payments.values() if start <= p.paid_at <= end]


class FakeConfirmedRepo:
    def __init__(self):
        self._next_id = 1
        self.records = {}

    def get(self, *, staff_id, month, year):
        return self.records.get((staff_id, month, year))

    def upsert(self, record):
        if record.confirmed_id is None:
            record = replace(record, confirmed_id=self._next_id)
            self._next_id += 1
        self.records[(record.staff_id, record.month, record.year)] = record
        return record

    def list_all(self, *, month=None, year=None):
        return [
            r
            for r in self.records.values()
            if (month is None or r.month == month) and (year is None or r.year == year)
        ]


class FakeProofRepo:
    def __init__(self):
        self.docs = {}

    def get(self, proof_date):
        return self.docs.get(proof_date)

    def save(self, submission):
        self.docs[submission.proof_date] = submission

    def delete(self, proof_date):
        return self.docs.pop(proof_date, None) is not None

    def list_between(self, start=None, end=None):
        days = [d for d in self.docs if (start is None or d >= start) and (end is None or d <= end)]
        return [self.docs[d] for d in sorted(days, reverse=True)]


@pytest.fixture
def users_repo():
    return FakeUserRepo()


@pytest.fixture
def staff_repo():
    return FakeStaffRepo()


@pytest.fixture
def attendance_repo():
    return FakeAttendanceRepo()


@pytest.fixture
def summaries_repo():
    return FakeSummaryRepo()


@pytest.fixture
def payments_repo():
    return FakePaymentRepo()


@pytest.fixture
def confirmed_repo():
    return FakeConfirmedRepo()


@pytest.fixture
def proofs_repo():
    return FakeProofRepo()


@pytest.fixture
def expense_service(summaries_repo):
    return ExpenseService(summaries_repo)


@pytest.fixture
def payroll_service(staff_repo, attendance_repo, summaries_repo, payments_repo, confirmed_repo):
    return PayrollService(
        staff=staff_repo,
        attendance=attendance_repo,
        summaries=summaries_repo,
        payments=payments_repo,
        confirmed=confirmed_repo,
        clock=fixed_clock,
    )


@pytest.fixture
def proof_storage(tmp_path):
    return LocalProofStorage(tmp_path / "proof", max_bytes=1024 * 1024, clock=fixed_clock)


@pytest.fixture
def proof_service(proofs_repo, proof_storage):
    return ProofService(proofs_repo, proof_storage, max_files=3)


@pytest.fixture
def container(
    users_repo,
    staff_repo,
    attendance_repo,
    summaries_repo,
    payments_repo,
    expense_service,
    payroll_service,
    proof_service,
):
    return Container(
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        staff_service=StaffService(staff_repo),
        attendance_service=AttendanceService(attendance_repo, staff_repo),
        expense_service=expense_service,
        payroll_service=payroll_service,
        proof_service=proof_service,
        analytics_service=AnalyticsService(summaries_repo, payments_repo, clock=fixed_clock),
        ocr_client=AzureReadClient(endpoint="", key=""),
    )


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from backoffice import create_app

    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def owner(users_repo):
    return users_repo.add(username="owner", email="owner@shop.test", password="secret1", role=Role.OWNER)


@pytest.fixture
def cashier_user(users_repo):
    return users_repo.add(username="cashier", email="cashier@shop.test", password="secret1", role=Role.STAFF)


def login(client, email, password="secret1"):
    return client.post("/api/v1/auth/login", json={"email": email, "password": password})


@pytest.fixture
def owner_client(client, owner):
    assert login(client, owner.email).status_code == 200
    return client


@pytest.fixture
def staff_client(client, cashier_user):
    assert login(client, cashier_user.email).status_code == 200
    return client

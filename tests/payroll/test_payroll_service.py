from datetime import date, datetime

import pytest

from backoffice.core.exceptions import NotFoundError, ValidationError
from backoffice.expenses.model import CashierEntry, DailySummary, StaffAdvance
from backoffice.payroll.model import SalaryPayment


def _advance_day(summaries_repo, day, *advances):
    summaries_repo.upsert(
        DailySummary(
            summary_date=day,
            cashiers=(
                CashierEntry(
                    name="A",
                    staff_advances=tuple(StaffAdvance(staff_id=s, amount=a) for s, a in advances),
                ),
            ),
        )
    )


@pytest.fixture
def ravi(staff_repo, attendance_repo, summaries_repo):
    s = staff_repo.add("Ravi", salary=3000.0)
    attendance_repo.mark_present(s.staff_id, *[date(2025, 4, d) for d in range(1, 21)])
    _advance_day(summaries_repo, date(2025, 4, 5), (s.staff_id, 500.0))
    return s


def test_preview_earned_and_payable(payroll_service, ravi):
    b = payroll_service.preview(ravi.staff_id, month=4, year=2025)

    assert b.present_days == 20
    assert b.earned_salary == 2000.0
    assert b.system_advance == 500.0
    assert b.advances == 500.0
    assert b.advance_due == 500.0
    assert b.payable == 1500.0
    assert [a.to_dict() for a in b.advance_lines] == [{"date": "2025-04-05", "amount": 500.0}]
    assert b.to_dict()["paid"] is False


def test_pay_salary_records_payment_and_staff_balance(payroll_service, ravi, staff_repo, payments_repo):
    payment = payroll_service.pay_salary(
        staff_id=ravi.staff_id, month=4, year=2025, paid_amount=1000, advance_until="2025-04-30", remark="part"
    )

    assert payment.payable == 1500.0
    assert payment.paid_amount == 1000.0
    assert payment.new_carry_forward == 500.0
    assert payment.remaining_advance == -500.0
    assert payment.advance_until == date(2025, 4, 30)
    assert staff_repo.get_by_id(ravi.staff_id).remaining_advance == -500.0
    assert len(payments_repo.payments) == 1


def test_paying_the_same_month_again_updates_the_one_payment(payroll_service, ravi, staff_repo, payments_repo):
    payroll_service.pay_salary(staff_id=ravi.staff_id, month=4, year=2025, paid_amount=1000, advance_until="2025-04-30")
    payment = payroll_service.pay_salary(
        staff_id=ravi.staff_id, month=4, year=2025, paid_amount=1500, advance_until="2025-04-30"
    )

    assert len(payments_repo.payments) == 1
    assert payment.previous_carry_forward == 0.0
    assert payment.payable == 1500.0
    assert payment.new_carry_forward == 0.0
    assert staff_repo.get_by_id(ravi.staff_id).remaining_advance == 0.0


def test_negative_paid_amount_is_clamped(payroll_service, ravi):
    payment = payroll_service.pay_salary(
        staff_id=ravi.staff_id, month=4, year=2025, paid_amount=-50, advance_until="2025-04-30"
    )
    assert payment.paid_amount == 0.0
    assert payment.new_carry_forward == 1500.0


def test_previous_balance_carries_into_next_month(payroll_service, ravi, attendance_repo, summaries_repo):
    payroll_service.pay_salary(staff_id=ravi.staff_id, month=4, year=2025, paid_amount=1000, advance_until="2025-04-30")
    attendance_repo.mark_present(ravi.staff_id, *[date(2025, 5, d) for d in range(1, 11)])
    _advance_day(summaries_repo, date(2025, 5, 2), (ravi.staff_id, 100.0))

    b = payroll_service.preview(ravi.staff_id, month=5, year=2025)

    # 3000 / 31 * 10 = 967.74; the shop still owes 500 from April
    assert b.earned_salary == 967.74
    assert b.previous_carry_forward == -500.0
    assert b.advance_due == -400.0
    assert b.payable == 1367.74


def test_advances_window_starts_after_previous_cutoff(payroll_service, ravi, payments_repo, summaries_repo):
    payments_repo.upsert(
        SalaryPayment(
            staff_id=ravi.staff_id,
            month=3,
            year=2025,
            attendance_start=date(2025, 3, 1),
            attendance_end=date(2025, 3, 31),
            paid_at=datetime(2025, 3, 31, 18, 0),
            advance_until=date(2025, 4, 10),
        )
    )
    _advance_day(summaries_repo, date(2025, 4, 20), (ravi.staff_id, 120.0))

    b = payroll_service.preview(ravi.staff_id, month=4, year=2025)

    assert b.advances_start == date(2025, 4, 11)
    assert b.system_advance == 120.0


def test_confirmed_adjustment_overrides_system_advance(payroll_service, ravi):
    payroll_service.confirm_advance(
        staff_id=ravi.staff_id, month=4, year=2025, system_calculated_advance=500, owner_adjustment_delta=-200
    )
    b = payroll_service.preview(ravi.staff_id, month=4, year=2025)
    assert b.owner_adjustment == -200.0
    assert b.advances == 300.0
    assert b.payable == 1700.0


def test_pay_salary_requires_advance_until(payroll_service, ravi):
    with pytest.raises(ValidationError):
        payroll_service.pay_salary(staff_id=ravi.staff_id, month=4, year=2025, paid_amount=10, advance_until="")
    with pytest.raises(ValidationError):
        payroll_service.pay_salary(staff_id=ravi.staff_id, month=4, year=2025, paid_amount=10, advance_until="30-04-2025")


def test_preview_rejects_bad_windows_and_unknown_staff(payroll_service, ravi):
    with pytest.raises(ValidationError):
        payroll_service.preview(ravi.staff_id, month=4, year=2025, start="2025-04-10", end="2025-04-01")
    with pytest.raises(ValidationError):
        payroll_service.preview(ravi.staff_id, month=13, year=2025)
    with pytest.raises(NotFoundError):
        payroll_service.preview(999, month=4, year=2025)


def test_confirm_advance_accumulates_and_keeps_history(payroll_service, ravi):
    first = payroll_service.confirm_advance(
        staff_id=ravi.staff_id, month=4, year=2025, system_calculated_advance=500, owner_adjustment_delta=-100,
        note="returned cash",
    )
    assert first.owner_adjustment == -100.0
    assert first.confirmed_advance == 400.0
    assert len(first.history) == 1

    same = payroll_service.confirm_advance(
        staff_id=ravi.staff_id, month=4, year=2025, system_calculated_advance=500, owner_adjustment_delta=0
    )
    assert same.owner_adjustment == -100.0
    assert len(same.history) == 1
    assert same.confirmed_id == first.confirmed_id

    more = payroll_service.confirm_advance(
        staff_id=ravi.staff_id, month=4, year=2025, system_calculated_advance=500, owner_adjustment_delta=50
    )
    assert more.owner_adjustment == -50.0
    assert more.confirmed_advance == 450.0
    assert [h.amount for h in more.history] == [-100.0, 50.0]

    assert [c.staff_id for c in payroll_service.list_confirmed(month=4, year=2025)] == [ravi.staff_id]
    assert payroll_service.list_confirmed(month=5, year=2025) == []


def test_range_settlement(payroll_service, staff_repo, attendance_repo, summaries_repo):
    s = staff_repo.add("Meena", salary=3000.0)
    attendance_repo.mark_present(s.staff_id, *[date(2025, 4, d) for d in range(1, 11)])
    _advance_day(summaries_repo, date(2025, 4, 5), (s.staff_id, 200.0))

    rows = payroll_service.prepare_range(start="2025-04-01", end="2025-04-15")
    row = next(r for r in rows if r["staff_id"] == s.staff_id)
    assert row["present_days"] == 10
    assert row["earned_salary"] == 1000.0
    assert row["advances_by_date"] == {"2025-04-05": [200.0]}
    assert row["total_advance"] == 200.0
    assert row["previous_carry_forward"] == 0.0

    payment = payroll_service.pay_range(
        staff_id=s.staff_id, start="2025-04-01", end="2025-04-15", owner_adjust=100, paid_amount=800
    )
    assert payment.payable == 900.0
    assert payment.new_carry_forward == 100.0
    assert staff_repo.get_by_id(s.staff_id).remaining_advance == -100.0

    history = payroll_service.range_history(start="2025-04-01", end="2025-04-15")
    assert [(h["staff_name"], h["paid_amount"]) for h in history] == [("Meena", 800.0)]
    assert payroll_service.range_history(start="2025-04-01", end="2025-04-30") == []


def test_two_windows_in_one_month_are_kept_apart(payroll_service, staff_repo, attendance_repo, payments_repo):
    s = staff_repo.add("Kiran", salary=3000.0)
    attendance_repo.mark_present(s.staff_id, *[date(2025, 4, d) for d in range(1, 31)])

    first = payroll_service.pay_range(
        staff_id=s.staff_id, start="2025-04-01", end="2025-04-15", owner_adjust=0, paid_amount=1400
    )
    assert first.payable == 1500.0
    assert staff_repo.get_by_id(s.staff_id).remaining_advance == -100.0

    row = next(
        r for r in payroll_service.prepare_range(start="2025-04-16", end="2025-04-30") if r["staff_id"] == s.staff_id
    )
    assert row["previous_carry_forward"] == -100.0

    second = payroll_service.pay_range(
        staff_id=s.staff_id, start="2025-04-16", end="2025-04-30", owner_adjust=0, paid_amount=1600
    )
    # the 100 still owed from the first half is paid with the second
    assert second.previous_carry_forward == -100.0
    assert second.payable == 1600.0
    assert second.payment_id != first.payment_id
    assert staff_repo.get_by_id(s.staff_id).remaining_advance == 0.0
    assert len(payments_repo.payments) == 2

    assert [h["paid_amount"] for h in payroll_service.range_history(start="2025-04-01", end="2025-04-15")] == [1400.0]
    assert [h["paid_amount"] for h in payroll_service.range_history(start="2025-04-16", end="2025-04-30")] == [1600.0]

    again = payroll_service.pay_range(
        staff_id=s.staff_id, start="2025-04-16", end="2025-04-30", owner_adjust=0, paid_amount=1600
    )
    assert again.payment_id == second.payment_id
    assert again.previous_carry_forward == -100.0
    assert len(payments_repo.payments) == 2


def test_range_and_monthly_payments_do_not_overwrite_each_other(payroll_service, ravi, payments_repo):
    payroll_service.pay_range(staff_id=ravi.staff_id, start="2025-04-01", end="2025-04-10", owner_adjust=0, paid_amount=0)
    payroll_service.pay_salary(staff_id=ravi.staff_id, month=4, year=2025, paid_amount=0, advance_until="2025-04-30")

    assert len(payments_repo.payments) == 2
    assert payments_repo.get(staff_id=ravi.staff_id, month=4, year=2025).kind.value == "monthly"


def test_remark_longer_than_the_column_is_rejected(payroll_service, ravi, payments_repo):
    with pytest.raises(ValidationError):
        payroll_service.pay_salary(
            staff_id=ravi.staff_id, month=4, year=2025, paid_amount=10, advance_until="2025-04-30", remark="x" * 256
        )
    assert payments_repo.payments == {}


def test_prepare_range_requires_both_dates(payroll_service):
    with pytest.raises(ValidationError):
        payroll_service.prepare_range(start="2025-04-01", end=None)


def test_advance_listings(payroll_service, ravi, staff_repo, summaries_repo):
    other = staff_repo.add("Anu")
    _advance_day(summaries_repo, date(2025, 4, 9), (ravi.staff_id, 25.0), (other.staff_id, 10.0))

    totals = {r["name"]: r["total_advance"] for r in payroll_service.staff_with_advances(month=4, year=2025)}
    assert totals == {"Ravi": 525.0, "Anu": 10.0}

    detail = payroll_service.staff_advances(ravi.staff_id, month=4, year=2025)
    assert detail["total_advance"] == 525.0
    assert [a["date"] for a in detail["advances"]] == ["2025-04-05", "2025-04-09"]

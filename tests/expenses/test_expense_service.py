from datetime import date

import pytest

from backoffice.core.exceptions import NotFoundError, ValidationError


def _payload(day="2025-03-02", tea_sold=500, tea_percent=10, tea_addon=50):
    return dict(
        summary_date=day,
        cashiers=[
            {
                "name": "A",
                "category": "counter",
                "items": [{"name": "Milk", "price": 200}],
                "addons": [{"name": "tea", "price": tea_addon}],
                "staff_advances": [],
                "total_sale": 1000,
                "money_left": 700,
                # client totals are ignored
                "shot": 999,
            }
        ],
        drinks=[{"drink_type": "tea", "sold_amount": tea_sold, "commission_percent": tea_percent}],
    )


def test_submit_recomputes_and_stores(expense_service, summaries_repo):
    summary = expense_service.submit_summary(**_payload())

    assert summary.cashiers[0].shot == 50.0
    assert summary.drinks[0].final_net_amount == 400.0
    assert summary.payout == 350.0
    assert summaries_repo.get(date(2025, 3, 2)) == summary


def test_previous_day_carry_loss_is_applied(expense_service):
    # 100 - 50 - 70 = -20 carried into the next day
    day1 = expense_service.submit_summary(
        summary_date="2025-03-01",
        cashiers=_payload()["cashiers"],
        drinks=[{"drink_type": "Tea", "sold_amount": 100, "commission_value": 70}],
    )
    assert day1.drinks[0].carry_loss == -20.0

    day2 = expense_service.submit_summary(**_payload("2025-03-02"))
    tea = day2.drinks[0]
    assert tea.previous_carry_loss == -20.0
    assert tea.combined_net == 380.0
    assert tea.carry_loss == 0.0
    assert day2.payout == 370.0


def test_resubmitting_the_same_day_is_idempotent(expense_service, summaries_repo):
    first = expense_service.submit_summary(**_payload())
    second = expense_service.submit_summary(**_payload())

    assert first == second
    assert summaries_repo.upserts == 2
    assert list(summaries_repo.summaries) == [date(2025, 3, 2)]


def test_camel_case_fields_are_accepted(expense_service):
    summary = expense_service.submit_summary(
        summary_date="2025-03-02",
        cashiers=[
            {
                "casherName": "A",
                "items": [{"name": "Milk", "price": "200"}],
                "addons": [],
                "staffAdvances": [{"staffId": "3", "amount": 40}],
                "totalSealAmount": 1000,
                "totalMoneyLift": 700,
            }
        ],
        drinks=[{"drinkType": "juice", "soldAmount": 100, "commissionValue": 10}],
    )
    cashier = summary.cashiers[0]
    assert cashier.name == "A"
    assert cashier.staff_advances[0].staff_id == 3
    assert cashier.shot == 60.0
    assert summary.drinks[0].final_net_amount == 90.0


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(summary_date="", cashiers=[], drinks=[]),
        dict(summary_date="2025-03-02", cashiers=None, drinks=[]),
        dict(summary_date="2025-03-02", cashiers=[], drinks=None),
        dict(summary_date="02/03/2025", cashiers=[], drinks=[]),
    ],
)
def test_missing_or_malformed_input_is_rejected(expense_service, kwargs):
    with pytest.raises(ValidationError):
        expense_service.submit_summary(**kwargs)


def test_duplicate_drink_types_are_rejected(expense_service):
    payload = _payload()
    payload["drinks"] = [
        {"drink_type": "tea", "sold_amount": 10},
        {"drink_type": "Tea ", "sold_amount": 20},
    ]
    with pytest.raises(ValidationError):
        expense_service.submit_summary(**payload)


@pytest.mark.parametrize("amount", ["nan", "inf", "-Infinity", float("nan"), float("inf")])
def test_non_finite_amounts_are_rejected(expense_service, summaries_repo, amount):
    payload = _payload()
    payload["drinks"] = [{"drink_type": "tea", "sold_amount": amount, "commission_percent": 10}]
    with pytest.raises(ValidationError):
        expense_service.submit_summary(**payload)

    payload = _payload()
    payload["cashiers"][0]["money_left"] = amount
    with pytest.raises(ValidationError):
        expense_service.submit_summary(**payload)
    assert summaries_repo.upserts == 0


def test_lookup_operations(expense_service):
    expense_service.submit_summary(**_payload("2025-03-01"))
    expense_service.submit_summary(**_payload("2025-03-03"))

    assert expense_service.summary_exists("2025-03-01") is True
    assert expense_service.summary_exists("2025-03-02") is False
    assert expense_service.submitted_dates() == ["2025-03-03", "2025-03-01"]
    assert [s.summary_date.day for s in expense_service.list_summaries(start="2025-03-01", end="2025-03-02")] == [1]
    assert expense_service.carry_loss_for("2025-03-01") == {"tea": 0.0}

    with pytest.raises(NotFoundError):
        expense_service.get_summary("2025-03-02")
    with pytest.raises(NotFoundError):
        expense_service.carry_loss_for("2025-03-02")

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from ..common.datetime_utils import format_iso_date, parse_iso_date, previous_day
from ..common.money import round2, to_amount
from ..common.validators import normalize_label, require_list
from ..core.exceptions import NotFoundError, ValidationError
from .calculator import ReconciliationCalculator
from .model import CashierEntry, DailySummary, DrinkEntry, LineItem, StaffAdvance
from .repository import DailySummaryRepository

logger = logging.getLogger(__name__)


def _pick(d: dict, *keys: str, default: Any = None) -> Any:
    """First present key; the till screens post camelCase, scripts post snake_case."""
    for k in keys:
        if k in d and d[k] is not None:
            return d[k]
    return default


def _parse_lines(raw: Any, field_name: str) -> tuple[LineItem, ...]:
    out = []
    for line in require_list(raw or [], field_name):
        if not isinstance(line, dict):
            raise ValidationError(f"Invalid {field_name} entry")
        name = str(line.get("name") or "").strip()
        price = to_amount(line.get("price"))
        if not name and not price:
            continue
        out.append(LineItem(name=name, price=round2(price)))
    return tuple(out)


def _parse_advances(raw: Any) -> tuple[StaffAdvance, ...]:
    out = []
    for a in require_list(raw or [], "staff_advances"):
        if not isinstance(a, dict):
            raise ValidationError("Invalid staff advance entry")
        amount = to_amount(a.get("amount"))
        if not amount:
            continue
        try:
            staff_id = int(_pick(a, "staff_id", "staffId"))
        except (TypeError, ValueError):
            raise ValidationError("Staff advance needs a staff_id")
        out.append(StaffAdvance(staff_id=staff_id, amount=round2(amount)))
    return tuple(out)


def parse_cashier(raw: Any) -> CashierEntry:
    if not isinstance(raw, dict):
        raise ValidationError("Invalid cashier entry")
    return CashierEntry(
        name=str(_pick(raw, "name", "casherName", default="")).strip(),
        category=str(raw.get("category") or "").strip(),
        items=_parse_lines(raw.get("items"), "items"),
        addons=_parse_lines(raw.get("addons"), "addons"),
        staff_advances=_parse_advances(_pick(raw, "staff_advances", "staffAdvances")),
        total_sale=round2(to_amount(_pick(raw, "total_sale", "totalSealAmount"))),
        money_left=round2(to_amount(_pick(raw, "money_left", "totalMoneyLift"))),
    )


def parse_drink(raw: Any) -> DrinkEntry:
    if not isinstance(raw, dict):
        raise ValidationError("Invalid drink entry")
    drink_type = str(_pick(raw, "drink_type", "drinkType", default="")).strip()
    if not drink_type:
        raise ValidationError("Drink type is required")
    percent = _pick(raw, "commission_percent", "commissionPercent")
    return DrinkEntry(
        drink_type=drink_type,
        sold_amount=round2(to_amount(_pick(raw, "sold_amount", "soldAmount"))),
        commission_percent=None if percent in (None, "") else to_amount(percent),
        commission_value=round2(to_amount(_pick(raw, "commission_value", "commissionValue"))),
    )


class ExpenseService:
    """Use case: daily cashier and drink reconciliation."""

    def __init__(self, summaries: DailySummaryRepository, calculator: Optional[ReconciliationCalculator] = None):
        self._summaries = summaries
        self._calculator = calculator or ReconciliationCalculator()

    def submit_summary(self, *, summary_date: Any, cashiers: Any, drinks: Any) -> DailySummary:
        """Recompute and store a day's summary, replacing any earlier save of that date.

        Client-side totals are ignored; everything derived is recomputed here.
        """
        if not summary_date or cashiers is None or drinks is None:
            raise ValidationError("Date, cashiers and drinks are required")
        day = parse_iso_date(summary_date)

        cashier_entries = [parse_cashier(c) for c in require_list(cashiers, "cashiers")]
        drink_entries = [parse_drink(d) for d in require_list(drinks, "drinks")]

        seen: set[str] = set()
        for d in drink_entries:
            key = normalize_label(d.drink_type)
            if key in seen:
                raise ValidationError(f"Duplicate drink type: {d.drink_type}")
            seen.add(key)

        summary = self._calculator.reconcile(
            summary_date=day,
            cashiers=cashier_entries,
            drinks=drink_entries,
            previous_carry_losses=self._carry_losses(previous_day(day)),
        )
        self._summaries.upsert(summary)
        logger.info("Daily summary saved for %s: payout=%.2f", format_iso_date(day), summary.payout)
        return summary

    def _carry_losses(self, day: date) -> dict[str, float]:
        previous = self._summaries.get(day)
        if not previous:
            return {}
        return {normalize_label(d.drink_type): d.carry_loss for d in previous.drinks}

    def get_summary(self, summary_date: Any) -> DailySummary:
        summary = self._summaries.get(parse_iso_date(summary_date))
        if not summary:
            raise NotFoundError("No summary found for this date")
        return summary

    def summary_exists(self, summary_date: Any) -> bool:
        return self._summaries.exists(parse_iso_date(summary_date))

    def submitted_dates(self) -> list[str]:
        return [format_iso_date(d) for d in self._summaries.list_dates()]

    def list_summaries(self, *, start: Any, end: Any) -> list[DailySummary]:
        start_d = parse_iso_date(start, "start")
        end_d = parse_iso_date(end, "end")
        if end_d < start_d:
            raise ValidationError("End date must not be before start date")
        return list(self._summaries.list_between(start_d, end_d))

    def carry_loss_for(self, summary_date: Any) -> dict[str, float]:
        """Carry-loss per drink type stored on a day; the next day starts from these."""
        summary = self.get_summary(summary_date)
        return {d.drink_type: d.carry_loss for d in summary.drinks}

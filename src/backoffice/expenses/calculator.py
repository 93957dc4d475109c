from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from ..common.money import round2, total
from ..common.validators import normalize_label
from ..core.constants import DRINK_TYPES
from .model import CashierEntry, DailySummary, DrinkEntry


class ReconciliationCalculator:
    """Daily cash reconciliation.

    Rules:
    - cashier total expenses = items + addons + staff advances
    - shot = declared sale - total expenses - money left in the till
    - drink raw expense = addon lines named like the drink, across every till
    - drink today net = sold - raw expense - commission
    - combined net = today net + yesterday's carry-loss for the same drink
    - carry-loss = combined net when negative, otherwise 0
    - payout = cashier sale - drinks net - cashier expenses (excl. drink addons) - shot
    """

    def __init__(self, drink_types: Iterable[str] = DRINK_TYPES):
        self._drink_types = frozenset(normalize_label(t) for t in drink_types)

    def settle_cashier(self, entry: CashierEntry) -> CashierEntry:
        expenses = total(
            [i.price for i in entry.items]
            + [a.price for a in entry.addons]
            + [s.amount for s in entry.staff_advances]
        )
        shot = round2(entry.total_sale - expenses - entry.money_left)
        return replace(entry, total_expenses=expenses, shot=shot)

    def raw_drink_expense(self, drink_type: str, cashiers: Sequence[CashierEntry]) -> float:
        key = normalize_label(drink_type)
        return total(a.price for c in cashiers for a in c.addons if normalize_label(a.name) == key)

    @staticmethod
    def commission(sold_amount: float, percent: Optional[float], flat_value: float) -> float:
        if percent is not None:
            return round2(sold_amount * percent / 100.0)
        return round2(flat_value)

    def settle_drink(self, drink: DrinkEntry, cashiers: Sequence[CashierEntry], previous_carry_loss: float) -> DrinkEntry:
        raw = self.raw_drink_expense(drink.drink_type, cashiers)
        commission = self.commission(drink.sold_amount, drink.commission_percent, drink.commission_value)
        # A positive stored value would mean yesterday ended in credit; only deficits carry.
        previous = min(round2(previous_carry_loss), 0.0)

        today_net = round2(drink.sold_amount - raw - commission)
        combined = round2(today_net + previous)

        return replace(
            drink,
            commission_value=commission,
            raw_expense=raw,
            today_net=today_net,
            previous_carry_loss=previous,
            combined_net=combined,
            final_net_amount=combined if combined > 0 else 0.0,
            carry_loss=combined if combined < 0 else 0.0,
        )

    def cashier_expenses_excluding_drinks(self, entry: CashierEntry, drink_keys: frozenset[str]) -> float:
        addons = [a.price for a in entry.addons if normalize_label(a.name) not in drink_keys]
        return total([i.price for i in entry.items] + addons + [s.amount for s in entry.staff_advances])

    def reconcile(
        self,
        *,
        summary_date: date,
        cashiers: Sequence[CashierEntry],
        drinks: Sequence[DrinkEntry],
        previous_carry_losses: Mapping[str, float],
    ) -> DailySummary:
        """Recompute every derived figure of a day.

        ``previous_carry_losses`` maps normalised drink type to the previous day's carry-loss.
        """
        settled_cashiers = tuple(self.settle_cashier(c) for c in cashiers)
        settled_drinks = tuple(
            self.settle_drink(d, settled_cashiers, previous_carry_losses.get(normalize_label(d.drink_type), 0.0))
            for d in drinks
        )

        drink_keys = self._drink_types | {normalize_label(d.drink_type) for d in drinks}

        total_sale = total(c.total_sale for c in settled_cashiers)
        total_drinks = total(d.final_net_amount for d in settled_drinks)
        total_shot = total(c.shot for c in settled_cashiers)
        total_expenses = total(self.cashier_expenses_excluding_drinks(c, drink_keys) for c in settled_cashiers)
        total_business = round2(total_sale + total(d.sold_amount for d in settled_drinks))

        return DailySummary(
            summary_date=summary_date,
            cashiers=settled_cashiers,
            drinks=settled_drinks,
            total_cashier_sale=total_sale,
            total_drinks_amount=total_drinks,
            total_shot=total_shot,
            total_cashier_expenses=total_expenses,
            total_business=total_business,
            payout=round2(total_sale - total_drinks - total_expenses - total_shot),
        )

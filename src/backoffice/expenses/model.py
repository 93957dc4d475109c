from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterator, Optional

from ..common.datetime_utils import format_iso_date


@dataclass(frozen=True)
class LineItem:
    name: str
    price: float

    def to_dict(self) -> dict:
        return {"name": self.name, "price": self.price}


@dataclass(frozen=True)
class StaffAdvance:
    """Cash handed to a staff member from a till, recovered from salary later."""

    staff_id: int
    amount: float

    def to_dict(self) -> dict:
        return {"staff_id": self.staff_id, "amount": self.amount}


@dataclass(frozen=True)
class CashierEntry:
    """One till's day: expenses paid out, addon lines, advances and the cash count."""

    name: str
    category: str = ""
    items: tuple[LineItem, ...] = ()
    addons: tuple[LineItem, ...] = ()
    staff_advances: tuple[StaffAdvance, ...] = ()
    total_sale: float = 0.0
    money_left: float = 0.0
    # computed server-side
    total_expenses: float = 0.0
    shot: float = 0.0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "category": self.category,
            "items": [i.to_dict() for i in self.items],
            "addons": [a.to_dict() for a in self.addons],
            "staff_advances": [a.to_dict() for a in self.staff_advances],
            "total_sale": self.total_sale,
            "money_left": self.money_left,
            "total_expenses": self.total_expenses,
            "shot": self.shot,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "CashierEntry":
        return cls(
            name=d.get("name", ""),
            category=d.get("category", ""),
            items=tuple(LineItem(name=i["name"], price=float(i["price"])) for i in d.get("items", [])),
            addons=tuple(LineItem(name=a["name"], price=float(a["price"])) for a in d.get("addons", [])),
            staff_advances=tuple(
                StaffAdvance(staff_id=int(a["staff_id"]), amount=float(a["amount"])) for a in d.get("staff_advances", [])
            ),
            total_sale=float(d.get("total_sale", 0)),
            money_left=float(d.get("money_left", 0)),
            total_expenses=float(d.get("total_expenses", 0)),
            shot=float(d.get("shot", 0)),
        )


@dataclass(frozen=True)
class DrinkEntry:
    """Commission settlement for one drink type (tea, juice) on one day.

    ``carry_loss`` is never positive: it is the deficit handed to the next day.
    """

    drink_type: str
    sold_amount: float
    commission_percent: Optional[float] = None
    commission_value: float = 0.0
    # computed server-side
    raw_expense: float = 0.0
    today_net: float = 0.0
    previous_carry_loss: float = 0.0
    combined_net: float = 0.0
    final_net_amount: float = 0.0
    carry_loss: float = 0.0

    def to_dict(self) -> dict:
        return {
            "drink_type": self.drink_type,
            "sold_amount": self.sold_amount,
            "commission_percent": self.commission_percent,
            "commission_value": self.commission_value,
            "raw_expense": self.raw_expense,
            "today_net": self.today_net,
            "previous_carry_loss": self.previous_carry_loss,
            "combined_net": self.combined_net,
            "final_net_amount": self.final_net_amount,
            "carry_loss": self.carry_loss,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "DrinkEntry":
        percent = d.get("commission_percent")
        return cls(
            drink_type=d.get("drink_type", ""),
            sold_amount=float(d.get("sold_amount", 0)),
            commission_percent=None if percent is None else float(percent),
            commission_value=float(d.get("commission_value", 0)),
            raw_expense=float(d.get("raw_expense", 0)),
            today_net=float(d.get("today_net", 0)),
            previous_carry_loss=float(d.get("previous_carry_loss", 0)),
            combined_net=float(d.get("combined_net", 0)),
            final_net_amount=float(d.get("final_net_amount", 0)),
            carry_loss=float(d.get("carry_loss", 0)),
        )


@dataclass(frozen=True)
class DailySummary:
    summary_date: date
    cashiers: tuple[CashierEntry, ...] = ()
    drinks: tuple[DrinkEntry, ...] = ()
    total_cashier_sale: float = 0.0
    total_drinks_amount: float = 0.0
    total_shot: float = 0.0
    total_cashier_expenses: float = 0.0
    total_business: float = 0.0
    payout: float = 0.0

    def iter_staff_advances(self) -> Iterator[StaffAdvance]:
        for cashier in self.cashiers:
            yield from cashier.staff_advances

    def to_dict(self) -> dict:
        return {
            "date": format_iso_date(self.summary_date),
            "cashiers": [c.to_dict() for c in self.cashiers],
            "drinks": [d.to_dict() for d in self.drinks],
            "total_cashier_sale": self.total_cashier_sale,
            "total_drinks_amount": self.total_drinks_amount,
            "total_shot": self.total_shot,
            "total_cashier_expenses": self.total_cashier_expenses,
            "total_business": self.total_business,
            "payout": self.payout,
        }

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, as_float, db_cursor, dump_json, fetchall, fetchone, load_json
from .model import CashierEntry, DailySummary, DrinkEntry
from .repository import DailySummaryRepository

_COLUMNS = (
    "summary_date, cashiers, drinks, total_cashier_sale, total_drinks_amount, total_shot, "
    "total_cashier_expenses, total_business, payout"
)


def _row_to_summary(r: dict) -> DailySummary:
    return DailySummary(
        summary_date=as_date(r["summary_date"]),
        cashiers=tuple(CashierEntry.from_dict(c) for c in load_json(r.get("cashiers"), [])),
        drinks=tuple(DrinkEntry.from_dict(d) for d in load_json(r.get("drinks"), [])),
        total_cashier_sale=as_float(r.get("total_cashier_sale")),
        total_drinks_amount=as_float(r.get("total_drinks_amount")),
        total_shot=as_float(r.get("total_shot")),
        total_cashier_expenses=as_float(r.get("total_cashier_expenses")),
        total_business=as_float(r.get("total_business")),
        payout=as_float(r.get("payout")),
    )


class MySQLDailySummaryRepository(DailySummaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, summary_date: date) -> Optional[DailySummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM daily_summaries WHERE summary_date=%s", (summary_date,))
            r = fetchone(cur)
            return _row_to_summary(r) if r else None

    def upsert(self, summary: DailySummary) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO daily_summaries({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    cashiers=VALUES(cashiers),
                    drinks=VALUES(drinks),
                    total_cashier_sale=VALUES(total_cashier_sale),
                    total_drinks_amount=VALUES(total_drinks_amount),
                    total_shot=VALUES(total_shot),
                    total_cashier_expenses=VALUES(total_cashier_expenses),
                    total_business=VALUES(total_business),
                    payout=VALUES(payout)
                """,
                (
                    summary.summary_date,
                    dump_json([c.to_dict() for c in summary.cashiers]),
                    dump_json([d.to_dict() for d in summary.drinks]),
                    summary.total_cashier_sale,
                    summary.total_drinks_amount,
                    summary.total_shot,
                    summary.total_cashier_expenses,
                    summary.total_business,
                    summary.payout,
                ),
            )

    def exists(self, summary_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM daily_summaries WHERE summary_date=%s LIMIT 1", (summary_date,))
            return fetchone(cur) is not None

    def list_dates(self) -> Sequence[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT summary_date FROM daily_summaries ORDER BY summary_date DESC")
            return [as_date(r["summary_date"]) for r in fetchall(cur)]

    def list_between(self, start: date, end: date) -> Sequence[DailySummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM daily_summaries WHERE summary_date BETWEEN %s AND %s ORDER BY summary_date",
                (start, end),
            )
            return [_row_to_summary(r) for r in fetchall(cur)]

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import SettlementKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, as_float, db_cursor, dump_json, fetchall, fetchone, load_json
from .model import AdjustmentEntry, ConfirmedAdvance, SalaryPayment
from .repository import ConfirmedAdvanceRepository, SalaryPaymentRepository

_PAYMENT_FIELDS = (
    "staff_id",
    "kind",
    "period_key",
    "month",
    "year",
    "present_days",
    "earned_salary",
    "advances",
    "owner_adjustment",
    "previous_carry_forward",
    "payable",
    "paid_amount",
    "new_carry_forward",
    "remaining_advance",
    "advance_until",
    "attendance_start",
    "attendance_end",
    "remark",
    "paid_at",
)
# period_key is derived from the other fields, so it is written but never read back.
_PAYMENT_COLUMNS = "payment_id, " + ", ".join(f for f in _PAYMENT_FIELDS if f != "period_key")


def _payment_params(payment: SalaryPayment) -> tuple:
    values = {f: getattr(payment, f) for f in _PAYMENT_FIELDS}
    values["kind"] = payment.kind.value
    return tuple(values[f] for f in _PAYMENT_FIELDS)


def _row_to_payment(r: dict) -> SalaryPayment:
    return SalaryPayment(
        payment_id=int(r["payment_id"]),
        staff_id=int(r["staff_id"]),
        kind=SettlementKind(r.get("kind") or SettlementKind.MONTHLY.value),
        month=int(r["month"]),
        year=int(r["year"]),
        present_days=int(r.get("present_days") or 0),
        earned_salary=as_float(r.get("earned_salary")),
        advances=as_float(r.get("advances")),
        owner_adjustment=as_float(r.get("owner_adjustment")),
        previous_carry_forward=as_float(r.get("previous_carry_forward")),
        payable=as_float(r.get("payable")),
        paid_amount=as_float(r.get("paid_amount")),
        new_carry_forward=as_float(r.get("new_carry_forward")),
        remaining_advance=as_float(r.get("remaining_advance")),
        advance_until=as_date(r.get("advance_until")),
        attendance_start=as_date(r["attendance_start"]),
        attendance_end=as_date(r["attendance_end"]),
        remark=r.get("remark") or "",
        paid_at=r["paid_at"],
    )


class MySQLSalaryPaymentRepository(SalaryPaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, staff_id: int, month: int, year: int) -> Optional[SalaryPayment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PAYMENT_COLUMNS} FROM salary_payments "
                "WHERE staff_id=%s AND kind=%s AND month=%s AND year=%s",
                (int(staff_id), SettlementKind.MONTHLY.value, int(month), int(year)),
            )
            r = fetchone(cur)
            return _row_to_payment(r) if r else None

    def get_for_window(self, *, staff_id: int, start: date, end: date) -> Optional[SalaryPayment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PAYMENT_COLUMNS} FROM salary_payments
                WHERE staff_id=%s AND kind=%s AND attendance_start=%s AND attendance_end=%s
                """,
                (int(staff_id), SettlementKind.RANGE.value, start, end),
            )
            r = fetchone(cur)
            return _row_to_payment(r) if r else None

    def upsert(self, payment: SalaryPayment) -> SalaryPayment:
        updates = ", ".join(f"{f}=VALUES({f})" for f in _PAYMENT_FIELDS[3:])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO salary_payments({", ".join(_PAYMENT_FIELDS)})
                VALUES({", ".join(["%s"] * len(_PAYMENT_FIELDS))})
                ON DUPLICATE KEY UPDATE payment_id=LAST_INSERT_ID(payment_id), {updates}
                """,
                _payment_params(payment),
            )
            return replace(payment, payment_id=int(cur.lastrowid))

    def last_before(self, *, staff_id: int, month: int, year: int) -> Optional[SalaryPayment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PAYMENT_COLUMNS} FROM salary_payments
                WHERE staff_id=%s AND (year < %s OR (year = %s AND month < %s))
                ORDER BY year DESC, month DESC, advance_until DESC
                LIMIT 1
                """,
                (int(staff_id), int(year), int(year), int(month)),
            )
            r = fetchone(cur)
            return _row_to_payment(r) if r else None

    def list_for_window(self, *, start: date, end: date) -> Sequence[SalaryPayment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PAYMENT_COLUMNS} FROM salary_payments
                WHERE attendance_start=%s AND attendance_end=%s
                ORDER BY staff_id
                """,
                (start, end),
            )
            return [_row_to_payment(r) for r in fetchall(cur)]

    def list_for_periods(self, periods: Sequence[tuple[int, int]]) -> Sequence[SalaryPayment]:
        if not periods:
            return []
        clause = " OR ".join(["(month=%s AND year=%s)"] * len(periods))
        params: list[int] = []
        for month, year in periods:
            params.extend([int(month), int(year)])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PAYMENT_COLUMNS} FROM salary_payments WHERE {clause}", tuple(params))
            return [_row_to_payment(r) for r in fetchall(cur)]

    def list_paid_between(self, *, start: datetime, end: datetime) -> Sequence[SalaryPayment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PAYMENT_COLUMNS} FROM salary_payments WHERE paid_at BETWEEN %s AND %s",
                (start, end),
            )
            return [_row_to_payment(r) for r in fetchall(cur)]


_CONFIRMED_COLUMNS = (
    "confirmed_id, staff_id, month, year, system_calculated_advance, owner_adjustment, "
    "confirmed_advance, history, confirmed_at"
)


def _row_to_confirmed(r: dict) -> ConfirmedAdvance:
    return ConfirmedAdvance(
        confirmed_id=int(r["confirmed_id"]),
        staff_id=int(r["staff_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        system_calculated_advance=as_float(r.get("system_calculated_advance")),
        owner_adjustment=as_float(r.get("owner_adjustment")),
        confirmed_advance=as_float(r.get("confirmed_advance")),
        history=tuple(AdjustmentEntry.from_dict(h) for h in load_json(r.get("history"), [])),
        confirmed_at=r.get("confirmed_at"),
    )


class MySQLConfirmedAdvanceRepository(ConfirmedAdvanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, staff_id: int, month: int, year: int) -> Optional[ConfirmedAdvance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_CONFIRMED_COLUMNS} FROM confirmed_advances WHERE staff_id=%s AND month=%s AND year=%s",
                (int(staff_id), int(month), int(year)),
            )
            r = fetchone(cur)
            return _row_to_confirmed(r) if r else None

    def upsert(self, record: ConfirmedAdvance) -> ConfirmedAdvance:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO confirmed_advances(
                    staff_id, month, year, system_calculated_advance, owner_adjustment,
                    confirmed_advance, history, confirmed_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    confirmed_id=LAST_INSERT_ID(confirmed_id),
                    system_calculated_advance=VALUES(system_calculated_advance),
                    owner_adjustment=VALUES(owner_adjustment),
                    confirmed_advance=VALUES(confirmed_advance),
                    history=VALUES(history),
                    confirmed_at=VALUES(confirmed_at)
                """,
                (
                    int(record.staff_id),
                    int(record.month),
                    int(record.year),
                    record.system_calculated_advance,
                    record.owner_adjustment,
                    record.confirmed_advance,
                    dump_json([h.to_dict() for h in record.history]),
                    record.confirmed_at,
                ),
            )
            return replace(record, confirmed_id=int(cur.lastrowid))

    def list_all(self, *, month: Optional[int] = None, year: Optional[int] = None) -> Sequence[ConfirmedAdvance]:
        where: list[str] = []
        params: list[int] = []
        if month is not None:
            where.append("month=%s")
            params.append(int(month))
        if year is not None:
            where.append("year=%s")
            params.append(int(year))
        sql = f"SELECT {_CONFIRMED_COLUMNS} FROM confirmed_advances"
        if where:
            sql += " WHERE " + " AND ".join(where)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY year DESC, month DESC, staff_id", tuple(params))
            return [_row_to_confirmed(r) for r in fetchall(cur)]

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, dump_json, fetchall, fetchone, load_json
from .model import ProofSubmission
from .repository import ProofRepository


def _row_to_submission(r: dict) -> ProofSubmission:
    return ProofSubmission(proof_date=as_date(r["proof_date"]), images=tuple(load_json(r.get("images"), [])))


class MySQLProofRepository(ProofRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, proof_date: date) -> Optional[ProofSubmission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT proof_date, images FROM proof_submissions WHERE proof_date=%s", (proof_date,))
            r = fetchone(cur)
            return _row_to_submission(r) if r else None

    def save(self, submission: ProofSubmission) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO proof_submissions(proof_date, images) VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE images=VALUES(images)
                """,
                (submission.proof_date, dump_json(list(submission.images))),
            )

    def delete(self, proof_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM proof_submissions WHERE proof_date=%s", (proof_date,))
            return cur.rowcount > 0

    def list_between(self, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[ProofSubmission]:
        where: list[str] = []
        params: list[date] = []
        if start:
            where.append("proof_date >= %s")
            params.append(start)
        if end:
            where.append("proof_date <= %s")
            params.append(end)
        sql = "SELECT proof_date, images FROM proof_submissions"
        if where:
            sql += " WHERE " + " AND ".join(where)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY proof_date DESC", tuple(params))
            return [_row_to_submission(r) for r in fetchall(cur)]

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .connection import DBConfig

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)

    sql = _strip_comments(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8")))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied to %s@%s/%s", target.user, target.host, target.database)


def ensure_owner_user(db_config: dict, *, email: str, password: str, username: str = "owner") -> None:
    """Create (or re-activate) the bootstrap owner account."""
    if not email or not password:
        logger.warning("OWNER_EMAIL/OWNER_PASSWORD not set; skipping owner bootstrap")
        return

    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)
        cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
        if cur.fetchone():
            cur.execute("UPDATE users SET role=%s, is_active=1 WHERE email=%s", (Role.OWNER.value, email))
        else:
            cur.execute(
                """
                INSERT INTO users (username, email, password_hash, role, is_active)
                VALUES (%s, %s, %s, %s, 1)
                """,
                (username, email, generate_password_hash(password), Role.OWNER.value),
            )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()

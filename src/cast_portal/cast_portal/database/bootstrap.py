from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator

import structlog

from .connection import DatabaseConnection
from .mysql_base import db_cursor

logger = structlog.get_logger("cast_portal.database")

_CREATE_DB_OR_USE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")


def split_statements(sql: str) -> Iterator[str]:
    """Split a schema file on `;`, ignoring semicolons inside quoted literals."""
    buf: list[str] = []
    quote: str | None = None
    escaped = False

    for ch in sql:
        buf.append(ch)
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    name = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path) -> None:
    ensure_database_exists(conn_factory)
    sql = _LINE_COMMENT.sub("", _CREATE_DB_OR_USE.sub("", Path(schema_path).read_text(encoding="utf-8")))

    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        count = 0
        for stmt in split_statements(sql):
            cur.execute(stmt)
            count += 1
    logger.info("schema_applied", database=conn_factory.config.database, statements=count)


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]


def apply_seed_sql(conn_factory: DatabaseConnection, *, seed_path: str | Path) -> None:
    sql = _LINE_COMMENT.sub("", Path(seed_path).read_text(encoding="utf-8"))
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        count = 0
        for stmt in split_statements(sql):
            cur.execute(stmt)
            count += 1
    logger.info("seed_applied", database=conn_factory.config.database, statements=count)

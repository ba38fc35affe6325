from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

# Quoted literals, a statement terminator, or a run of anything else.
_SQL_TOKEN = re.compile(r"""'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*"|;|[^'";]+|['"]""", re.S)
_DB_SELECTION = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")


def prepare_schema(sql: str) -> str:
    """Drop comments and database selection; the configured database is used instead."""
    return _DB_SELECTION.sub("", _LINE_COMMENT.sub("", sql))


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on ``;`` outside of quoted literals."""
    current: list[str] = []
    for match in _SQL_TOKEN.finditer(sql):
        token = match.group(0)
        if token != ";":
            current.append(token)
            continue
        statement = "".join(current).strip()
        current = []
        if statement:
            yield statement

    tail = "".join(current).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    """Create the database if needed and run every schema statement.

    Returns the number of statements executed.
    """
    ensure_database_exists(db_config)
    statements = list(iter_sql_statements(prepare_schema(Path(schema_path).read_text(encoding="utf-8"))))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for statement in statements:
            cur.execute(statement)
        conn.commit()
    finally:
        conn.close()
    logger.info("schema applied from %s (%d statements)", schema_path, len(statements))
    return len(statements)


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()

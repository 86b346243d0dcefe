from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional

from werkzeug.security import generate_password_hash

from .connection import CHARSET, COLLATION, DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "123456"
SUPER_ADMIN_RUT = "11.111.111-1"
DEMO_RUTS = (
    SUPER_ADMIN_RUT,
    "12.345.678-9",
    "13.456.789-0",
    "14.567.890-1",
    *(f"20.{i:03d}.{i * 111:03d}-{i}" for i in range(1, 10)),
    "20.010.000-0",
)


_DB_SCOPED = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b", re.IGNORECASE)
_QUOTES = {"'", '"', "`"}


def split_sql(script: str) -> Iterator[str]:
    """Yield the statements of a SQL script without their trailing ``;``.

    Quoted text ('...', "...", `...`) may contain semicolons and backslash
    escapes. ``--`` and ``#`` comments run to the end of the line.
    """

    current: list[str] = []
    quote: Optional[str] = None
    i, n = 0, len(script)
    while i < n:
        ch = script[i]
        if quote:
            current.append(ch)
            if ch == "\\" and quote != "`" and i + 1 < n:
                current.append(script[i + 1])
                i += 1
            elif ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
            current.append(ch)
        elif ch == "#" or script.startswith("--", i):
            eol = script.find("\n", i)
            i = n if eol < 0 else eol
            continue
        elif ch == ";":
            statement = "".join(current).strip()
            if statement:
                yield statement
            current = []
        else:
            current.append(ch)
        i += 1

    statement = "".join(current).strip()
    if statement:
        yield statement


def schema_statements(script: str) -> list[str]:
    """Statements to run against an existing database.

    ``CREATE DATABASE`` and ``USE`` are dropped so the files work under any
    database name.
    """

    return [s for s in split_sql(script) if not _DB_SCOPED.match(s)]


def _run_statements(cur, statements: Iterable[str]) -> int:
    count = 0
    for statement in statements:
        cur.execute(statement)
        count += 1
    return count


@contextmanager
def _session(db_config: dict, *, with_database: bool = True):
    """Plain (tuple) cursor on a fresh connection; commits on success."""

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect(with_database=with_database)
    try:
        cur = conn.cursor()
        yield cur
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    name = DBConfig.from_dict(db_config).database
    with _session(db_config, with_database=False) as cur:
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET {CHARSET} COLLATE {COLLATION}")


def _apply_sql_file(db_config: dict, path: Path) -> int:
    statements = schema_statements(path.read_text(encoding="utf-8"))
    with _session(db_config) as cur:
        return _run_statements(cur, statements)


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _apply_sql_file(db_config, Path(schema_path))
    logger.info("Schema aplicado (%d sentencias)", count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _apply_sql_file(db_config, Path(seed_path))
    logger.info("Seed aplicado (%d sentencias)", count)


def ensure_demo_users(db_config: dict, *, password: str = DEMO_PASSWORD) -> int:
    """Give every demo account a real password hash.

    seed.sql inserts a placeholder so no hash is ever committed to the repo.
    """

    marks = ", ".join(["%s"] * len(DEMO_RUTS))
    with _session(db_config) as cur:
        cur.execute(
            f"UPDATE usuarios SET password_hash=%s, activo=1 WHERE rut IN ({marks})",
            (generate_password_hash(password), *DEMO_RUTS),
        )
        updated = cur.rowcount
    logger.info("Usuarios demo listos (%d actualizados)", updated)
    return updated


def list_tables(db_config: dict) -> list[str]:
    with _session(db_config) as cur:
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())

from __future__ import annotations

import json
import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

from fieldsheets import config  # noqa: F401  (.env is loaded before the DB_* lookups)

APP_ENV = (os.environ.get("APP_ENV") or os.environ.get("FIELDSHEETS_ENV") or "development").strip().lower()
ALLOW_SQLITE = os.environ.get("ALLOW_SQLITE", "").strip().lower() in {"1", "true", "yes"}

if not os.environ.get("DB_HOST") and APP_ENV in {"production", "staging"} and not ALLOW_SQLITE:
    raise RuntimeError(
        "DB_HOST is required when APP_ENV is set to production or staging. "
        "Set DB_HOST/DB_* secrets or explicitly opt into SQLite with ALLOW_SQLITE=1 for temporary use."
    )

log = logging.getLogger("uvicorn.error")

USE_POSTGRES = bool(os.environ.get("DB_HOST"))

if USE_POSTGRES:
    import psycopg2
    from psycopg2 import pool
    from psycopg2.extras import Json, RealDictCursor

    _required = ["DB_HOST", "DB_USER", "DB_PASSWORD"]
    _missing = [name for name in _required if not os.environ.get(name)]
    if _missing:
        missing = ", ".join(sorted(_missing))
        raise RuntimeError(f"PostgreSQL backend enabled but missing environment variables: {missing}")

    _CONFIG = {
        "host": os.environ["DB_HOST"],
        "dbname": os.environ.get("DB_NAME", "fieldsheets"),
        "user": os.environ["DB_USER"],
        "password": os.environ["DB_PASSWORD"],
        "port": int(os.environ.get("DB_PORT", "5432")),
        "sslmode": os.environ.get("DB_SSLMODE", "require"),
    }
    _POOL = pool.SimpleConnectionPool(1, int(os.environ.get("DB_POOL_MAX", "10")), **_CONFIG)

    def adapt_sql(sql: str) -> str:
        cleaned = sql.strip().rstrip(";")
        return cleaned.replace("?", "%s")

    class PostgresConnection:
        """Pooled connection exposing the sqlite3-style ``execute`` used by the stores."""

        def __init__(self, raw_conn: "psycopg2.extensions.connection") -> None:
            self._raw = raw_conn
            self._returned = False

        def close(self) -> None:
            if not self._returned:
                _POOL.putconn(self._raw)
                self._returned = True

        def execute(self, sql: str, params: tuple = ()):
            cursor = self._raw.cursor(cursor_factory=RealDictCursor)
            cursor.execute(adapt_sql(sql), params)
            return cursor

        def commit(self) -> None:
            self._raw.commit()

        def rollback(self) -> None:
            self._raw.rollback()

    @contextmanager
    def get_postgres_conn() -> Iterator[PostgresConnection]:
        conn = PostgresConnection(_POOL.getconn())
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def json_param(value: Any) -> Any:
        return Json(value)
else:
    def adapt_sql(sql: str) -> str:
        return sql

    @contextmanager
    def get_postgres_conn():  # type: ignore
        raise RuntimeError("PostgreSQL connection requested but DB_HOST is not set")
        yield

    def json_param(value: Any) -> Any:
        return json.dumps(value, ensure_ascii=False)


@contextmanager
def sqlite_conn(path: Path) -> Iterator[sqlite3.Connection]:
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def load_json(value: Any) -> Optional[Any]:
    """JSONB columns come back decoded from psycopg2, TEXT columns as strings."""
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        return value
    try:
        return json.loads(value)
    except (TypeError, json.JSONDecodeError) as exc:
        log.error("Unreadable JSON column value (%s): %.80r", exc, value)
        return None

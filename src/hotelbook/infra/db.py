"""Database access layer using psycopg2.

Provides:
- get_conn(): Get a database connection from DATABASE_URL
- txn(): Context manager for one short transaction with deadlines applied
- fetchone/fetchall: Query helpers
- for_update(): SELECT ... FOR UPDATE helper
- PersistenceFailure: raised when the store times out or is unreachable
"""

import os
from contextlib import contextmanager
from typing import Any, Iterator, Sequence

import psycopg2
from psycopg2.extensions import connection as PgConnection, cursor as PgCursor, parse_dsn

DEFAULT_STATEMENT_TIMEOUT_MS = 5000
DEFAULT_LOCK_TIMEOUT_MS = 3000


class PersistenceFailure(Exception):
    """The store failed, timed out or could not be reached.

    The transaction has been rolled back. Callers may retry the whole
    operation when ``retryable`` is True.
    """

    reason_code = "persistence_failure"

    def __init__(self, message: str, *, retryable: bool = True) -> None:
        self.retryable = retryable
        super().__init__(message)


def _timeout_ms(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer number of milliseconds")
    return max(value, 0)


def get_conn() -> PgConnection:
    """Get a new database connection from DATABASE_URL.

    DATABASE_URL may be a postgres:// URL or a libpq key=value DSN. When it
    carries no password, DB_PASSWORD is passed separately.

    Raises:
        RuntimeError: If DATABASE_URL is not set.
        psycopg2.Error: On connection failure.
    """
    dsn = os.environ.get("DATABASE_URL")
    if not dsn:
        raise RuntimeError("DATABASE_URL environment variable not set")

    db_password = os.environ.get("DB_PASSWORD")
    if db_password and not parse_dsn(dsn).get("password"):
        return psycopg2.connect(dsn, password=db_password)
    return psycopg2.connect(dsn)


def _apply_deadlines(cur: PgCursor) -> None:
    """Bound every statement and lock wait of the current transaction."""
    statement_ms = _timeout_ms("DB_STATEMENT_TIMEOUT_MS", DEFAULT_STATEMENT_TIMEOUT_MS)
    lock_ms = _timeout_ms("DB_LOCK_TIMEOUT_MS", DEFAULT_LOCK_TIMEOUT_MS)
    cur.execute(
        "SELECT set_config('statement_timeout', %s, true), set_config('lock_timeout', %s, true)",
        (str(statement_ms), str(lock_ms)),
    )


@contextmanager
def txn(conn: PgConnection | None = None) -> Iterator[PgCursor]:
    """Context manager for a short, safe transaction.

    If conn is None, creates a new connection that is closed on exit.
    Commits on successful exit, rolls back on exception. Operational errors
    (statement/lock timeouts, dropped connections) surface as
    PersistenceFailure with the driver error chained.

    Example:
        with txn() as cur:
            cur.execute("UPDATE rooms SET is_active = false WHERE id = %s", (room_id,))
    """
    owns_conn = conn is None
    if owns_conn:
        try:
            conn = get_conn()
        except psycopg2.OperationalError as exc:
            raise PersistenceFailure("database unavailable") from exc

    try:
        with conn.cursor() as cur:
            _apply_deadlines(cur)
            yield cur
        conn.commit()
    except psycopg2.OperationalError as exc:
        conn.rollback()
        raise PersistenceFailure("database operation failed or timed out") from exc
    except Exception:
        conn.rollback()
        raise
    finally:
        if owns_conn:
            conn.close()


def fetchone(
    cur: PgCursor,
    query: str,
    params: Sequence[Any] | None = None,
) -> tuple[Any, ...] | None:
    """Execute query and fetch one row, or None."""
    cur.execute(query, params)
    return cur.fetchone()


def fetchall(
    cur: PgCursor,
    query: str,
    params: Sequence[Any] | None = None,
) -> list[tuple[Any, ...]]:
    """Execute query and fetch all rows."""
    cur.execute(query, params)
    return cur.fetchall()


def for_update(
    cur: PgCursor,
    query: str,
    params: Sequence[Any] | None = None,
    *,
    nowait: bool = False,
) -> tuple[Any, ...] | None:
    """Execute SELECT ... FOR UPDATE and fetch one row.

    The row stays locked until the surrounding transaction ends. Waiting is
    bounded by the transaction's lock_timeout unless nowait is set.
    """
    suffix = " FOR UPDATE NOWAIT" if nowait else " FOR UPDATE"
    full_query = query.rstrip().rstrip(";") + suffix
    cur.execute(full_query, params)
    return cur.fetchone()

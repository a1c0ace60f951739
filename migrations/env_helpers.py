"""Database URL helpers for Alembic migrations.

Kept apart from env.py so they can be tested without an alembic context.
"""

from __future__ import annotations

import os

from psycopg2.extensions import parse_dsn
from sqlalchemy.engine import URL

# libpq keys that map onto URL components; everything else goes to the query
_URL_KEYS = ("user", "password", "host", "port", "dbname")


def dsn_to_url(dsn: str) -> URL:
    """Convert a libpq DSN (URL or key=value form) to a SQLAlchemy URL.

    A host that is a directory (unix socket, e.g. Cloud SQL) is passed as
    the `host` query parameter, which is how psycopg2 expects it. DB_PASSWORD
    fills in a missing password.
    """
    tokens = parse_dsn(dsn)

    password = tokens.get("password") or os.environ.get("DB_PASSWORD") or None
    host = tokens.get("host")
    query = {k: v for k, v in tokens.items() if k not in _URL_KEYS}

    if host and host.startswith("/"):
        query["host"] = host
        host = None
        port = None
    else:
        host = host or "localhost"
        port = int(tokens.get("port") or 5432)

    return URL.create(
        "postgresql+psycopg2",
        username=tokens.get("user"),
        password=password,
        host=host,
        port=port,
        database=tokens.get("dbname"),
        query=query,
    )


def get_database_url() -> str:
    """SQLAlchemy URL string for DATABASE_URL, password included."""
    raw = os.environ.get("DATABASE_URL")
    if not raw:
        raise RuntimeError("DATABASE_URL is required to run migrations")
    return dsn_to_url(raw).render_as_string(hide_password=False)

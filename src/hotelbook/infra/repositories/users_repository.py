"""Users repository - identity records mirrored from the OIDC provider.

Uses raw SQL with psycopg2 (no ORM). Passwords never reach this table;
the provider owns credentials, we only keep name, e-mail and role.
"""

from psycopg2.extensions import cursor as PgCursor

from hotelbook.infra.db import fetchall, fetchone

USER_COLUMNS = "id, external_subject, email, name, role"


def row_to_user(row: tuple) -> dict:
    return {
        "id": str(row[0]),
        "external_subject": row[1],
        "email": row[2],
        "name": row[3],
        "role": row[4],
    }


def get_user_by_subject(cur: PgCursor, external_subject: str) -> dict | None:
    row = fetchone(
        cur,
        f"SELECT {USER_COLUMNS} FROM users WHERE external_subject = %s",
        (external_subject,),
    )
    return row_to_user(row) if row is not None else None


def get_users_by_ids(cur: PgCursor, user_ids: list[str]) -> dict[str, dict]:
    """Batch lookup keyed by id. Missing ids are absent from the result."""
    if not user_ids:
        return {}
    rows = fetchall(
        cur,
        f"SELECT {USER_COLUMNS} FROM users WHERE id = ANY(%s::uuid[])",
        (list(user_ids),),
    )
    users = [row_to_user(row) for row in rows]
    return {user["id"]: user for user in users}


def insert_user(
    cur: PgCursor,
    *,
    external_subject: str,
    name: str,
    email: str,
    role: str = "client",
) -> dict:
    """Insert a user.

    E-mail is stored lowercase. A duplicate subject or e-mail raises
    psycopg2 UniqueViolation.
    """
    row = fetchone(
        cur,
        f"""
        INSERT INTO users (external_subject, name, email, role)
        VALUES (%s, %s, %s, %s)
        RETURNING {USER_COLUMNS}
        """,
        (external_subject, name, email.strip().lower(), role),
    )
    return row_to_user(row)

"""Seed a demo hotel: one receptionist, one client and eight rooms.

Usage:
    DATABASE_URL=... SEED_RECEPTIONIST_SUBJECT=... SEED_CLIENT_SUBJECT=... \
        python -m hotelbook.operations.seed_demo

The subjects are the OIDC `sub` claims of the two demo accounts at the
identity provider. Safe to run repeatedly: existing rows are left alone.
"""

import os

from psycopg2.extensions import cursor as PgCursor

from hotelbook.infra.db import txn

# number, room_type, capacity, price_per_night_cents
DEMO_ROOMS = (
    ("101", "Simple", 1, 8000),
    ("102", "Double", 2, 12000),
    ("103", "Double", 2, 12000),
    ("201", "Suite", 3, 20000),
    ("202", "Suite", 4, 25000),
    ("301", "Simple", 1, 9000),
    ("302", "Double", 2, 13000),
    ("303", "Double", 2, 13000),
)


def env(name: str, default: str | None = None) -> str:
    v = os.getenv(name, default)
    if v is None or v.strip() == "":
        raise RuntimeError(f"Missing env var: {name}")
    return v


def seed(cur: PgCursor, *, receptionist_subject: str, client_subject: str) -> dict:
    """Insert demo rows that are not there yet. Returns counts of new rows."""
    users = (
        (receptionist_subject, "Front Desk", "reception@hotel.example", "receptionist"),
        (client_subject, "Demo Guest", "client@hotel.example", "client"),
    )
    users_created = 0
    for external_subject, name, email, role in users:
        cur.execute(
            """
            INSERT INTO users (external_subject, name, email, role)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT DO NOTHING
            """,
            (external_subject, name, email, role),
        )
        users_created += cur.rowcount

    rooms_created = 0
    for number, room_type, capacity, price_cents in DEMO_ROOMS:
        cur.execute(
            """
            INSERT INTO rooms (number, room_type, capacity, price_per_night_cents, is_active)
            VALUES (%s, %s, %s, %s, true)
            ON CONFLICT (number) DO NOTHING
            """,
            (number, room_type, capacity, price_cents),
        )
        rooms_created += cur.rowcount

    return {"users_created": users_created, "rooms_created": rooms_created}


def main() -> int:
    env("DATABASE_URL")
    receptionist_subject = env("SEED_RECEPTIONIST_SUBJECT")
    client_subject = env("SEED_CLIENT_SUBJECT")

    with txn() as cur:
        result = seed(
            cur,
            receptionist_subject=receptionist_subject,
            client_subject=client_subject,
        )

    print("seed ok:", result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

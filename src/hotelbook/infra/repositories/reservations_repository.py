"""Reservations repository - persistence for reservation records.

Uses raw SQL with psycopg2 (no ORM). Dates come back as datetime.date;
ids as strings.
"""

from datetime import date

from psycopg2.extensions import cursor as PgCursor

from hotelbook.infra.db import fetchall, fetchone, for_update

RESERVATION_COLUMNS = (
    "id, user_id, room_id, checkin, checkout, status, total_cents, created_at, updated_at"
)


def row_to_reservation(row: tuple) -> dict:
    return {
        "id": str(row[0]),
        "user_id": str(row[1]),
        "room_id": str(row[2]) if row[2] is not None else None,
        "checkin": row[3],
        "checkout": row[4],
        "status": row[5],
        "total_cents": row[6],
        "created_at": row[7],
        "updated_at": row[8],
    }


def insert_reservation(
    cur: PgCursor,
    *,
    user_id: str,
    room_id: str,
    checkin: date,
    checkout: date,
    total_cents: int,
    status: str = "pending",
) -> dict:
    """Insert a reservation.

    Raises psycopg2 ExclusionViolation when the no_room_overlap constraint
    rejects the interval.
    """
    row = fetchone(
        cur,
        f"""
        INSERT INTO reservations (user_id, room_id, checkin, checkout, status, total_cents)
        VALUES (%s, %s, %s, %s, %s, %s)
        RETURNING {RESERVATION_COLUMNS}
        """,
        (user_id, room_id, checkin, checkout, status, total_cents),
    )
    return row_to_reservation(row)


def get_reservation(cur: PgCursor, reservation_id: str) -> dict | None:
    row = fetchone(
        cur,
        f"SELECT {RESERVATION_COLUMNS} FROM reservations WHERE id = %s",
        (reservation_id,),
    )
    return row_to_reservation(row) if row is not None else None


def lock_reservation(cur: PgCursor, reservation_id: str) -> dict | None:
    row = for_update(
        cur,
        f"SELECT {RESERVATION_COLUMNS} FROM reservations WHERE id = %s",
        (reservation_id,),
    )
    return row_to_reservation(row) if row is not None else None


def update_status(cur: PgCursor, reservation_id: str, status: str) -> dict | None:
    row = fetchone(
        cur,
        f"""
        UPDATE reservations
        SET status = %s, updated_at = now()
        WHERE id = %s
        RETURNING {RESERVATION_COLUMNS}
        """,
        (status, reservation_id),
    )
    return row_to_reservation(row) if row is not None else None


def update_reservation(
    cur: PgCursor,
    reservation_id: str,
    *,
    status: str,
    checkin: date,
    checkout: date,
    total_cents: int,
) -> dict | None:
    """Full rewrite of the mutable columns (staff edit)."""
    row = fetchone(
        cur,
        f"""
        UPDATE reservations
        SET status = %s,
            checkin = %s,
            checkout = %s,
            total_cents = %s,
            updated_at = now()
        WHERE id = %s
        RETURNING {RESERVATION_COLUMNS}
        """,
        (status, checkin, checkout, total_cents, reservation_id),
    )
    return row_to_reservation(row) if row is not None else None


def list_reservations(
    cur: PgCursor,
    *,
    status: str | None = None,
    limit: int = 200,
) -> list[dict]:
    """All reservations, newest first, optionally filtered by status."""
    conditions: list[str] = []
    params: list = []
    if status:
        conditions.append("status = %s")
        params.append(status)
    where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
    params.append(limit)

    rows = fetchall(
        cur,
        f"""
        SELECT {RESERVATION_COLUMNS}
        FROM reservations
        {where}
        ORDER BY created_at DESC
        LIMIT %s
        """,
        params,
    )
    return [row_to_reservation(row) for row in rows]


def list_reservations_for_user(cur: PgCursor, user_id: str) -> list[dict]:
    rows = fetchall(
        cur,
        f"""
        SELECT {RESERVATION_COLUMNS}
        FROM reservations
        WHERE user_id = %s
        ORDER BY created_at DESC
        """,
        (user_id,),
    )
    return [row_to_reservation(row) for row in rows]


def list_arrivals(cur: PgCursor, day: date) -> list[dict]:
    """Non-cancelled reservations checking in on day."""
    rows = fetchall(
        cur,
        f"""
        SELECT {RESERVATION_COLUMNS}
        FROM reservations
        WHERE checkin = %s AND status <> 'cancelled'
        ORDER BY checkin, created_at
        """,
        (day,),
    )
    return [row_to_reservation(row) for row in rows]


def list_departures(cur: PgCursor, day: date) -> list[dict]:
    """Non-cancelled reservations checking out on day."""
    rows = fetchall(
        cur,
        f"""
        SELECT {RESERVATION_COLUMNS}
        FROM reservations
        WHERE checkout = %s AND status <> 'cancelled'
        ORDER BY checkout, created_at
        """,
        (day,),
    )
    return [row_to_reservation(row) for row in rows]


def count_occupied_rooms(cur: PgCursor, day: date) -> int:
    """Distinct active rooms with a non-cancelled stay covering the night of day."""
    row = fetchone(
        cur,
        """
        SELECT COUNT(DISTINCT r.room_id)
        FROM reservations r
        JOIN rooms rm ON rm.id = r.room_id
        WHERE r.checkin <= %s
          AND r.checkout > %s
          AND r.status <> 'cancelled'
          AND rm.is_active = true
        """,
        (day, day),
    )
    return int(row[0]) if row else 0


def has_active_future_reservations(cur: PgCursor, room_id: str, today: date) -> bool:
    """True if the room has a non-cancelled reservation ending after today."""
    row = fetchone(
        cur,
        """
        SELECT 1 FROM reservations
        WHERE room_id = %s
          AND status <> 'cancelled'
          AND checkout > %s
        LIMIT 1
        """,
        (room_id, today),
    )
    return row is not None

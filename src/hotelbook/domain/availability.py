"""Room availability - the overlap rule shared by search, booking and edits.

Overlap formula:  (existing_checkin < new_checkout) AND (existing_checkout > new_checkin)
Strict inequality allows check-out day == check-in day (back-to-back stays are OK).

Every status except 'cancelled' blocks the room.
"""

from __future__ import annotations

import logging
from datetime import date

from psycopg2.extensions import cursor as PgCursor

from hotelbook.infra.repositories.rooms_repository import ROOM_COLUMNS, row_to_room
from hotelbook.observability.logging import get_logger, log_event

logger = get_logger(__name__)

BLOCKING_EXCLUDED_STATUS = "cancelled"


def check_room_conflict(
    cur: PgCursor,
    *,
    room_id: str,
    check_in: date,
    check_out: date,
    exclude_reservation_id: str | None = None,
) -> str | None:
    """Find a reservation that overlaps [check_in, check_out) on the room.

    Args:
        cur: Database cursor (should be within a transaction).
        room_id: Room identifier.
        check_in: Desired check-in date (inclusive).
        check_out: Desired check-out date (exclusive / departure day).
        exclude_reservation_id: Reservation ID to ignore (for date edits).

    Returns:
        The ID of the first conflicting reservation, or None if the room is free.
    """
    conditions = [
        "room_id = %s",
        "status <> %s",
        "checkin < %s",   # existing checkin < new checkout
        "checkout > %s",  # existing checkout > new checkin
    ]
    params: list = [room_id, BLOCKING_EXCLUDED_STATUS, check_out, check_in]

    if exclude_reservation_id is not None:
        conditions.append("id <> %s")
        params.append(exclude_reservation_id)

    cur.execute(
        f"""
        SELECT id, checkin, checkout
        FROM reservations
        WHERE {" AND ".join(conditions)}
        ORDER BY checkin
        LIMIT 1
        """,
        params,
    )
    row = cur.fetchone()
    if row is None:
        return None

    conflicting_id = str(row[0])
    log_event(
        logger,
        "room conflict detected",
        level=logging.WARNING,
        room_id=room_id,
        requested_checkin=check_in,
        requested_checkout=check_out,
        conflicting_reservation_id=conflicting_id,
        existing_checkin=row[1],
        existing_checkout=row[2],
    )
    return conflicting_id


def is_room_available(
    cur: PgCursor,
    *,
    room_id: str,
    check_in: date,
    check_out: date,
    exclude_reservation_id: str | None = None,
) -> bool:
    """True if nothing overlaps. An empty or inverted range is never available."""
    if check_out <= check_in:
        return False
    conflicting_id = check_room_conflict(
        cur,
        room_id=room_id,
        check_in=check_in,
        check_out=check_out,
        exclude_reservation_id=exclude_reservation_id,
    )
    return conflicting_id is None


def list_available_rooms(cur: PgCursor, *, check_in: date, check_out: date) -> list[dict]:
    """Active rooms with no overlapping reservation, ordered by number."""
    if check_out <= check_in:
        return []

    cur.execute(
        f"""
        SELECT {ROOM_COLUMNS}
        FROM rooms rm
        WHERE rm.is_active = true
          AND NOT EXISTS (
              SELECT 1 FROM reservations r
              WHERE r.room_id = rm.id
                AND r.status <> %s
                AND r.checkin < %s
                AND r.checkout > %s
          )
        ORDER BY rm.number
        """,
        (BLOCKING_EXCLUDED_STATUS, check_out, check_in),
    )
    return [row_to_room(row) for row in cur.fetchall()]

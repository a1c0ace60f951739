"""Rooms repository - persistence for the room catalog.

Uses raw SQL with psycopg2 (no ORM).
"""

from psycopg2.extensions import cursor as PgCursor

from hotelbook.infra.db import fetchall, fetchone, for_update

ROOM_COLUMNS = "id, number, room_type, capacity, price_per_night_cents, is_active"

# Columns a partial update may touch
UPDATABLE_FIELDS = ("number", "room_type", "capacity", "price_per_night_cents", "is_active")


def row_to_room(row: tuple) -> dict:
    return {
        "id": str(row[0]),
        "number": row[1],
        "room_type": row[2],
        "capacity": row[3],
        "price_per_night_cents": row[4],
        "is_active": row[5],
    }


def list_rooms(cur: PgCursor, *, active_only: bool = False) -> list[dict]:
    """List rooms ordered by room number."""
    where = "WHERE is_active = true" if active_only else ""
    rows = fetchall(cur, f"SELECT {ROOM_COLUMNS} FROM rooms {where} ORDER BY number")
    return [row_to_room(row) for row in rows]


def get_room(cur: PgCursor, room_id: str) -> dict | None:
    row = fetchone(cur, f"SELECT {ROOM_COLUMNS} FROM rooms WHERE id = %s", (room_id,))
    return row_to_room(row) if row is not None else None


def lock_room(cur: PgCursor, room_id: str) -> dict | None:
    """Fetch a room and hold its row lock until the transaction ends.

    The room row is the per-room mutex: every operation that adds a
    non-cancelled interval to a room takes it before checking availability.
    """
    row = for_update(cur, f"SELECT {ROOM_COLUMNS} FROM rooms WHERE id = %s", (room_id,))
    return row_to_room(row) if row is not None else None


def get_rooms_by_ids(cur: PgCursor, room_ids: list[str]) -> dict[str, dict]:
    """Batch lookup. Missing ids are simply absent from the result."""
    if not room_ids:
        return {}
    rows = fetchall(
        cur,
        f"SELECT {ROOM_COLUMNS} FROM rooms WHERE id = ANY(%s::uuid[])",
        (list(room_ids),),
    )
    rooms = [row_to_room(row) for row in rows]
    return {room["id"]: room for room in rooms}


def count_active_rooms(cur: PgCursor) -> int:
    row = fetchone(cur, "SELECT COUNT(*) FROM rooms WHERE is_active = true")
    return int(row[0]) if row else 0


def insert_room(
    cur: PgCursor,
    *,
    number: str,
    room_type: str,
    capacity: int,
    price_per_night_cents: int,
    is_active: bool = True,
) -> dict:
    """Insert a room. A duplicate number raises psycopg2 UniqueViolation."""
    row = fetchone(
        cur,
        f"""
        INSERT INTO rooms (number, room_type, capacity, price_per_night_cents, is_active)
        VALUES (%s, %s, %s, %s, %s)
        RETURNING {ROOM_COLUMNS}
        """,
        (number, room_type, capacity, price_per_night_cents, is_active),
    )
    return row_to_room(row)


def update_room(cur: PgCursor, room_id: str, fields: dict) -> dict | None:
    """Partial update of whitelisted columns. Returns None if the room is missing."""
    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update room fields: {sorted(unknown)}")
    if not fields:
        raise ValueError("No fields to update")

    sets: list[str] = ["updated_at = now()"]
    params: list = []
    for column in UPDATABLE_FIELDS:
        if column in fields:
            sets.append(f"{column} = %s")
            params.append(fields[column])
    params.append(room_id)

    row = fetchone(
        cur,
        f"""
        UPDATE rooms
        SET {", ".join(sets)}
        WHERE id = %s
        RETURNING {ROOM_COLUMNS}
        """,  # noqa: S608 – SET clause only holds whitelisted column names
        params,
    )
    return row_to_room(row) if row is not None else None


def delete_room(cur: PgCursor, room_id: str) -> bool:
    row = fetchone(cur, "DELETE FROM rooms WHERE id = %s RETURNING id", (room_id,))
    return row is not None

"""Attach guest and room records to reservation dicts.

One batched query per related table instead of one per reservation.
"""

from __future__ import annotations

from psycopg2.extensions import cursor as PgCursor

from hotelbook.infra.repositories import rooms_repository, users_repository


def _public_guest(user: dict) -> dict:
    return {"id": user["id"], "name": user["name"], "email": user["email"]}


def attach_related(
    cur: PgCursor,
    reservations: list[dict],
    *,
    guests: bool = True,
    rooms: bool = True,
) -> list[dict]:
    """Add "guest" and/or "room" keys to each reservation, in place.

    A key is None when the related row no longer exists (e.g. a deleted
    room). Returns the same list for chaining.
    """
    if not reservations:
        return reservations

    users_by_id: dict[str, dict] = {}
    rooms_by_id: dict[str, dict] = {}

    if guests:
        user_ids = sorted({r["user_id"] for r in reservations if r.get("user_id")})
        users_by_id = users_repository.get_users_by_ids(cur, user_ids)
    if rooms:
        room_ids = sorted({r["room_id"] for r in reservations if r.get("room_id")})
        rooms_by_id = rooms_repository.get_rooms_by_ids(cur, room_ids)

    for reservation in reservations:
        if guests:
            user = users_by_id.get(reservation["user_id"])
            reservation["guest"] = _public_guest(user) if user else None
        if rooms:
            reservation["room"] = rooms_by_id.get(reservation["room_id"])

    return reservations

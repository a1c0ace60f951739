"""Room catalog endpoints (role 'receptionist').

GET    /rooms                                   -> list, ordered by number
POST   /rooms                                   -> create
GET    /rooms/{id}                              -> get
PATCH  /rooms/{id}                              -> partial update
DELETE /rooms/{id}                              -> delete (204)
GET    /rooms/{id}/availability?checkin&checkout -> free for the dates?
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from pydantic import BaseModel, ConfigDict, Field

from hotelbook.api.auth import CurrentUser
from hotelbook.api.errors import to_http_exception
from hotelbook.api.rbac import require_receptionist
from hotelbook.domain.errors import ReservationError
from hotelbook.infra.db import txn
from hotelbook.observability.logging import get_logger, log_event

logger = get_logger(__name__)

router = APIRouter(prefix="/rooms", tags=["rooms"])


# ── Schemas ───────────────────────────────────────────────────────────────────


class CreateRoomRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    number: str = Field(..., min_length=1, max_length=20)
    room_type: str = Field(..., min_length=1, max_length=50)
    capacity: int = Field(..., ge=1, le=10)
    price_per_night_cents: int = Field(..., ge=0)
    is_active: bool = True


class UpdateRoomRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    number: str | None = Field(None, min_length=1, max_length=20)
    room_type: str | None = Field(None, min_length=1, max_length=50)
    capacity: int | None = Field(None, ge=1, le=10)
    price_per_night_cents: int | None = Field(None, ge=0)
    is_active: bool | None = None


# ── Routes ────────────────────────────────────────────────────────────────────


@router.get("")
def list_rooms(
    active_only: bool = Query(False, description="Only bookable rooms"),
    user: CurrentUser = Depends(require_receptionist),
) -> list[dict]:
    """List rooms ordered by number."""
    from hotelbook.infra.repositories.rooms_repository import list_rooms as _list_rooms

    with txn() as cur:
        return _list_rooms(cur, active_only=active_only)


@router.post("", status_code=201)
def create_room(
    body: CreateRoomRequest,
    user: CurrentUser = Depends(require_receptionist),
) -> dict:
    """Create a room. Fails with 409 if the number is already used."""
    from psycopg2 import errors as pg_errors

    from hotelbook.infra.repositories.rooms_repository import insert_room

    try:
        with txn() as cur:
            room = insert_room(
                cur,
                number=body.number.strip(),
                room_type=body.room_type.strip(),
                capacity=body.capacity,
                price_per_night_cents=body.price_per_night_cents,
                is_active=body.is_active,
            )
    except pg_errors.UniqueViolation:
        raise HTTPException(status_code=409, detail="Room number already exists")

    log_event(logger, "room created", room_id=room["id"], number=room["number"])
    return room


@router.get("/{room_id}")
def get_room(
    room_id: UUID = Path(..., description="Room ID"),
    user: CurrentUser = Depends(require_receptionist),
) -> dict:
    from hotelbook.infra.repositories.rooms_repository import get_room as _get_room

    with txn() as cur:
        room = _get_room(cur, str(room_id))

    if room is None:
        raise HTTPException(status_code=404, detail="Room not found")
    return room


@router.patch("/{room_id}")
def update_room(
    room_id: UUID = Path(..., description="Room ID"),
    body: UpdateRoomRequest = ...,
    user: CurrentUser = Depends(require_receptionist),
) -> dict:
    """Update only the provided fields.

    400 when nothing is provided, 422 on an explicit null, 409 on a
    duplicate number.
    """
    from psycopg2 import errors as pg_errors

    from hotelbook.infra.repositories.rooms_repository import update_room as _update_room

    fields = body.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    nulls = sorted(key for key, value in fields.items() if value is None)
    if nulls:
        raise HTTPException(status_code=422, detail=f"Fields cannot be null: {', '.join(nulls)}")
    for key in ("number", "room_type"):
        if key in fields:
            fields[key] = fields[key].strip()

    try:
        with txn() as cur:
            room = _update_room(cur, str(room_id), fields)
    except pg_errors.UniqueViolation:
        raise HTTPException(status_code=409, detail="Room number already exists")

    if room is None:
        raise HTTPException(status_code=404, detail="Room not found")

    log_event(logger, "room updated", room_id=room["id"], fields=sorted(fields))
    return room


@router.delete("/{room_id}", status_code=204)
def delete_room(
    room_id: UUID = Path(..., description="Room ID"),
    user: CurrentUser = Depends(require_receptionist),
) -> None:
    """Delete a room. 409 while it has current or upcoming reservations."""
    from hotelbook.domain.rooms import delete_room as _delete_room

    try:
        _delete_room(str(room_id))
    except ReservationError as exc:
        raise to_http_exception(exc)


@router.get("/{room_id}/availability")
def room_availability(
    room_id: UUID = Path(..., description="Room ID"),
    checkin: date = Query(..., description="Check-in date (YYYY-MM-DD)"),
    checkout: date = Query(..., description="Check-out date (YYYY-MM-DD)"),
    user: CurrentUser = Depends(require_receptionist),
) -> dict:
    """Whether the room is free for [checkin, checkout).

    An inverted range is reported as not available rather than an error.
    """
    from hotelbook.domain.availability import is_room_available
    from hotelbook.infra.repositories.rooms_repository import get_room as _get_room

    with txn() as cur:
        room = _get_room(cur, str(room_id))
        if room is None:
            raise HTTPException(status_code=404, detail="Room not found")
        available = is_room_available(
            cur, room_id=room["id"], check_in=checkin, check_out=checkout
        )

    return {
        "room_id": room["id"],
        "checkin": checkin,
        "checkout": checkout,
        "available": available,
    }

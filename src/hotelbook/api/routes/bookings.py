"""Guest-facing booking endpoints (role 'client').

GET  /bookings/search?checkin=&checkout=  -> free rooms for the dates
POST /bookings                            -> book a room (pending)
GET  /bookings                            -> own reservations, newest first
POST /bookings/{id}/cancel                -> cancel own reservation
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, ConfigDict

from hotelbook.api.auth import CurrentUser
from hotelbook.api.errors import to_http_exception
from hotelbook.api.rbac import require_client
from hotelbook.domain.errors import InvalidDateRangeError, ReservationError

router = APIRouter(prefix="/bookings", tags=["bookings"])


class CreateBookingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    room_id: UUID
    checkin: date
    checkout: date


@router.get("/search")
def search_rooms(
    checkin: date = Query(..., description="Check-in date (YYYY-MM-DD)"),
    checkout: date = Query(..., description="Check-out date (YYYY-MM-DD)"),
    user: CurrentUser = Depends(require_client),
) -> list[dict]:
    """Active rooms free for the whole stay, ordered by number."""
    from hotelbook.domain.availability import list_available_rooms
    from hotelbook.infra.db import txn

    if checkout <= checkin:
        raise to_http_exception(InvalidDateRangeError(checkin, checkout))

    with txn() as cur:
        return list_available_rooms(cur, check_in=checkin, check_out=checkout)


@router.post("", status_code=201)
def create_booking(
    body: CreateBookingRequest,
    user: CurrentUser = Depends(require_client),
) -> dict:
    """Book a room for the calling guest. The reservation starts 'pending'.

    422 on inverted dates, 404 for a missing or inactive room, 409 when
    the room is taken for any of the nights.
    """
    from hotelbook.domain.reservations import create_reservation

    try:
        return create_reservation(
            guest_id=user.id,
            room_id=str(body.room_id),
            check_in=body.checkin,
            check_out=body.checkout,
        )
    except ReservationError as exc:
        raise to_http_exception(exc)


@router.get("")
def list_my_bookings(user: CurrentUser = Depends(require_client)) -> list[dict]:
    """The caller's reservations with their room, newest first."""
    from hotelbook.domain.related import attach_related
    from hotelbook.infra.db import txn
    from hotelbook.infra.repositories.reservations_repository import list_reservations_for_user

    with txn() as cur:
        reservations = list_reservations_for_user(cur, user.id)
        return attach_related(cur, reservations, guests=False)


@router.post("/{reservation_id}/cancel")
def cancel_booking(
    reservation_id: UUID = Path(..., description="Reservation ID"),
    user: CurrentUser = Depends(require_client),
) -> dict:
    """Cancel one of the caller's reservations.

    Cancelling twice is not an error: the second call reports
    "already_cancelled". Someone else's reservation is a 404.
    """
    from hotelbook.domain.reservations import cancel_guest_reservation

    try:
        return cancel_guest_reservation(str(reservation_id), guest_id=user.id)
    except ReservationError as exc:
        raise to_http_exception(exc)

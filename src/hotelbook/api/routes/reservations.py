"""Reservation management endpoints (role 'receptionist').

GET   /reservations[?status=]                  -> list with guest and room, newest first
GET   /reservations/{id}                       -> one, with guest and room
PATCH /reservations/{id}                       -> edit status and/or dates
POST  /reservations/{id}/actions/approve       -> pending -> confirmed
POST  /reservations/{id}/actions/cancel        -> pending/confirmed/completed -> cancelled
POST  /reservations/{id}/actions/complete      -> confirmed -> completed
"""

from __future__ import annotations

from datetime import date
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from pydantic import BaseModel, ConfigDict

from hotelbook.api.auth import CurrentUser
from hotelbook.api.errors import to_http_exception
from hotelbook.api.rbac import require_receptionist
from hotelbook.domain.errors import ReservationError

ReservationStatus = Literal["pending", "confirmed", "cancelled", "completed"]


class EditReservationRequest(BaseModel):
    """Staff edit. Dates are optional but go together."""

    model_config = ConfigDict(extra="forbid")

    status: ReservationStatus
    checkin: date | None = None
    checkout: date | None = None


router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.get("")
def list_reservations(
    status: ReservationStatus | None = Query(None, description="Filter by status"),
    limit: int = Query(200, ge=1, le=500),
    user: CurrentUser = Depends(require_receptionist),
) -> list[dict]:
    from hotelbook.domain.related import attach_related
    from hotelbook.infra.db import txn
    from hotelbook.infra.repositories.reservations_repository import (
        list_reservations as _list_reservations,
    )

    with txn() as cur:
        reservations = _list_reservations(cur, status=status, limit=limit)
        return attach_related(cur, reservations)


@router.get("/{reservation_id}")
def get_reservation(
    reservation_id: UUID = Path(..., description="Reservation ID"),
    user: CurrentUser = Depends(require_receptionist),
) -> dict:
    from hotelbook.domain.related import attach_related
    from hotelbook.infra.db import txn
    from hotelbook.infra.repositories.reservations_repository import (
        get_reservation as _get_reservation,
    )

    with txn() as cur:
        reservation = _get_reservation(cur, str(reservation_id))
        if reservation is None:
            raise HTTPException(status_code=404, detail="Reservation not found")
        attach_related(cur, [reservation])

    return reservation


@router.patch("/{reservation_id}")
def edit_reservation(
    reservation_id: UUID = Path(..., description="Reservation ID"),
    body: EditReservationRequest = ...,
    user: CurrentUser = Depends(require_receptionist),
) -> dict:
    """Set status and optionally move the dates.

    New dates are checked against the room's other reservations and the
    total is repriced. 422 on a partial or inverted range, 409 on overlap.
    """
    from hotelbook.domain.reservations import edit_reservation as _edit_reservation

    try:
        return _edit_reservation(
            str(reservation_id),
            status=body.status,
            check_in=body.checkin,
            check_out=body.checkout,
        )
    except ReservationError as exc:
        raise to_http_exception(exc)


@router.post("/{reservation_id}/actions/approve")
def approve(
    reservation_id: UUID = Path(..., description="Reservation ID"),
    user: CurrentUser = Depends(require_receptionist),
) -> dict:
    """Confirm a pending reservation. 409 from any other status."""
    from hotelbook.domain.reservations import approve_reservation

    try:
        return approve_reservation(str(reservation_id))
    except ReservationError as exc:
        raise to_http_exception(exc)


@router.post("/{reservation_id}/actions/cancel")
def cancel(
    reservation_id: UUID = Path(..., description="Reservation ID"),
    user: CurrentUser = Depends(require_receptionist),
) -> dict:
    """Cancel, including a completed stay. Already cancelled is a no-op."""
    from hotelbook.domain.reservations import cancel_reservation

    try:
        return cancel_reservation(str(reservation_id))
    except ReservationError as exc:
        raise to_http_exception(exc)


@router.post("/{reservation_id}/actions/complete")
def complete(
    reservation_id: UUID = Path(..., description="Reservation ID"),
    user: CurrentUser = Depends(require_receptionist),
) -> dict:
    """Close a confirmed stay. 409 from any other status."""
    from hotelbook.domain.reservations import complete_reservation

    try:
        return complete_reservation(str(reservation_id))
    except ReservationError as exc:
        raise to_http_exception(exc)

"""Translation of domain failures into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException

from hotelbook.domain.errors import (
    InvalidDateRangeError,
    InvalidStateTransitionError,
    NotFoundError,
    ReservationError,
    RoomInactiveError,
    RoomInUseError,
    RoomUnavailableError,
)

_STATUS_BY_ERROR: dict[type[ReservationError], int] = {
    InvalidDateRangeError: 422,
    NotFoundError: 404,
    RoomInactiveError: 404,
    RoomUnavailableError: 409,
    InvalidStateTransitionError: 409,
    RoomInUseError: 409,
}


def to_http_exception(exc: ReservationError) -> HTTPException:
    """HTTPException for a domain failure. Unknown kinds become 400."""
    status_code = _STATUS_BY_ERROR.get(type(exc), 400)
    if isinstance(exc, RoomInactiveError):
        # Guests cannot tell an inactive room from a missing one
        detail = "Room not found or inactive"
    else:
        detail = str(exc)
    return HTTPException(status_code=status_code, detail=detail)

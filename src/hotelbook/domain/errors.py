"""Typed failures of the booking domain.

Each carries a stable reason_code so callers can tell failure kinds apart
without parsing messages. Storage failures are PersistenceFailure
(hotelbook.infra.db) and are not part of this hierarchy.
"""

from datetime import date


class ReservationError(Exception):
    reason_code = "reservation_error"


class InvalidDateRangeError(ReservationError):
    """checkout is not strictly after checkin."""

    reason_code = "invalid_dates"

    def __init__(self, check_in: date | None, check_out: date | None, message: str | None = None) -> None:
        self.check_in = check_in
        self.check_out = check_out
        super().__init__(message or "Check-out date must be after check-in date")


class NotFoundError(ReservationError):
    reason_code = "not_found"

    def __init__(self, entity: str, entity_id: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} {entity_id} not found")


class RoomInactiveError(ReservationError):
    reason_code = "room_inactive"

    def __init__(self, room_id: str) -> None:
        self.room_id = room_id
        super().__init__(f"Room {room_id} is not active")


class RoomUnavailableError(ReservationError):
    """The room already has an overlapping non-cancelled reservation."""

    reason_code = "room_unavailable"

    def __init__(self, room_id: str, conflicting_reservation_id: str | None = None) -> None:
        self.room_id = room_id
        self.conflicting_reservation_id = conflicting_reservation_id
        super().__init__(f"Room {room_id} is not available for these dates")


class InvalidStateTransitionError(ReservationError):
    reason_code = "invalid_state_transition"

    def __init__(self, reservation_id: str, current: str, requested: str) -> None:
        self.reservation_id = reservation_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Reservation {reservation_id} is '{current}', cannot move to '{requested}'"
        )


class RoomInUseError(ReservationError):
    """Room still has non-cancelled reservations that have not ended."""

    reason_code = "room_in_use"

    def __init__(self, room_id: str) -> None:
        self.room_id = room_id
        super().__init__(f"Room {room_id} has active reservations and cannot be deleted")

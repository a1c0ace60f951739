"""Reservation workflow - booking creation and status transitions.

State machine:
    pending -> confirmed -> completed
    pending | confirmed -> cancelled
'cancelled' and 'completed' are terminal.

Concurrency contract: anything that can add an interval to a room's set of
non-cancelled reservations first locks the room row (FOR UPDATE) and holds
it across the availability check and the write. The no_room_overlap
exclusion constraint backs this up at the store level; a violation is
reported as RoomUnavailableError. Lock order is always room, then
reservation.
"""

from __future__ import annotations

import logging
from datetime import date

from psycopg2 import errors as pg_errors

from hotelbook.domain.availability import check_room_conflict
from hotelbook.domain.errors import (
    InvalidDateRangeError,
    InvalidStateTransitionError,
    NotFoundError,
    RoomInactiveError,
    RoomUnavailableError,
)
from hotelbook.infra.db import txn
from hotelbook.infra.repositories import reservations_repository, rooms_repository
from hotelbook.observability.logging import get_logger, log_event

logger = get_logger(__name__)

STATUSES = ("pending", "confirmed", "cancelled", "completed")
TERMINAL_STATUSES = ("cancelled", "completed")

_TRANSITIONS: dict[str, tuple[str, ...]] = {
    "pending": ("confirmed", "cancelled"),
    "confirmed": ("completed", "cancelled"),
    "cancelled": (),
    "completed": (),
}


def nights_between(check_in: date, check_out: date) -> int:
    return (check_out - check_in).days


def compute_total_cents(price_per_night_cents: int, check_in: date, check_out: date) -> int:
    return nights_between(check_in, check_out) * price_per_night_cents


def is_allowed_transition(current: str, new: str) -> bool:
    return new in _TRANSITIONS.get(current, ())


def _validate_range(check_in: date, check_out: date) -> None:
    if check_out <= check_in:
        raise InvalidDateRangeError(check_in, check_out)


def create_reservation(
    *,
    guest_id: str,
    room_id: str,
    check_in: date,
    check_out: date,
) -> dict:
    """Book a room for a guest.

    Runs in one transaction:
    1. Lock the room row (per-room mutex)
    2. Reject missing or inactive rooms
    3. Re-check availability while holding the lock
    4. Price the stay from the room's current nightly rate
    5. Insert the reservation as 'pending'

    Nothing is written if any step fails.

    Returns:
        The created reservation dict.

    Raises:
        InvalidDateRangeError: check_out is not after check_in.
        NotFoundError: The room does not exist.
        RoomInactiveError: The room is not bookable.
        RoomUnavailableError: The dates overlap another reservation.
    """
    _validate_range(check_in, check_out)

    with txn() as cur:
        room = rooms_repository.lock_room(cur, room_id)
        if room is None:
            raise NotFoundError("room", room_id)
        if not room["is_active"]:
            raise RoomInactiveError(room_id)

        conflicting_id = check_room_conflict(
            cur, room_id=room_id, check_in=check_in, check_out=check_out
        )
        if conflicting_id is not None:
            raise RoomUnavailableError(room_id, conflicting_id)

        total_cents = compute_total_cents(room["price_per_night_cents"], check_in, check_out)
        try:
            reservation = reservations_repository.insert_reservation(
                cur,
                user_id=guest_id,
                room_id=room_id,
                checkin=check_in,
                checkout=check_out,
                total_cents=total_cents,
            )
        except pg_errors.ExclusionViolation as exc:
            raise RoomUnavailableError(room_id) from exc

    log_event(
        logger,
        "reservation created",
        reservation_id=reservation["id"],
        room_id=room_id,
        checkin=check_in,
        checkout=check_out,
        total_cents=total_cents,
    )
    return reservation


def approve_reservation(reservation_id: str) -> dict:
    """Move a pending reservation to confirmed.

    Raises:
        NotFoundError: No such reservation.
        InvalidStateTransitionError: The reservation is not pending.
    """
    with txn() as cur:
        current = reservations_repository.lock_reservation(cur, reservation_id)
        if current is None:
            raise NotFoundError("reservation", reservation_id)
        if current["status"] != "pending":
            raise InvalidStateTransitionError(reservation_id, current["status"], "confirmed")
        updated = reservations_repository.update_status(cur, reservation_id, "confirmed")

    log_event(logger, "reservation approved", reservation_id=reservation_id)
    return updated


def complete_reservation(reservation_id: str) -> dict:
    """Close out a confirmed stay."""
    with txn() as cur:
        current = reservations_repository.lock_reservation(cur, reservation_id)
        if current is None:
            raise NotFoundError("reservation", reservation_id)
        if current["status"] != "confirmed":
            raise InvalidStateTransitionError(reservation_id, current["status"], "completed")
        updated = reservations_repository.update_status(cur, reservation_id, "completed")

    log_event(logger, "reservation completed", reservation_id=reservation_id)
    return updated


def cancel_reservation(reservation_id: str) -> dict:
    """Staff cancellation: cancels a pending, confirmed or completed stay.

    Unlike the guest path, staff may cancel a completed stay (front desk
    correction of a stay that did not happen). Idempotent: an already
    cancelled reservation is left untouched.

    Returns:
        - {"status": "already_cancelled", "reservation_id": str}
        - {"status": "cancelled", "reservation_id": str, "previous_status": str}

    Raises:
        NotFoundError: No such reservation.
    """
    with txn() as cur:
        current = reservations_repository.lock_reservation(cur, reservation_id)
        if current is None:
            raise NotFoundError("reservation", reservation_id)

        if current["status"] == "cancelled":
            return {"status": "already_cancelled", "reservation_id": reservation_id}

        reservations_repository.update_status(cur, reservation_id, "cancelled")

    log_event(
        logger,
        "reservation cancelled by staff",
        reservation_id=reservation_id,
        previous_status=current["status"],
    )
    return {
        "status": "cancelled",
        "reservation_id": reservation_id,
        "previous_status": current["status"],
    }


def cancel_guest_reservation(reservation_id: str, *, guest_id: str) -> dict:
    """Guest cancellation of their own reservation.

    Idempotent: an already cancelled reservation is left untouched.

    Returns:
        - {"status": "already_cancelled", "reservation_id": str}
        - {"status": "cancelled", "reservation_id": str, "previous_status": str}

    Raises:
        NotFoundError: Missing, or owned by another guest.
        InvalidStateTransitionError: The stay is already completed.
    """
    with txn() as cur:
        current = reservations_repository.lock_reservation(cur, reservation_id)
        # Someone else's reservation is reported exactly like a missing one
        if current is None or current["user_id"] != guest_id:
            raise NotFoundError("reservation", reservation_id)

        if current["status"] == "cancelled":
            return {"status": "already_cancelled", "reservation_id": reservation_id}

        # Guests follow the state machine; only staff can cancel a completed stay
        if not is_allowed_transition(current["status"], "cancelled"):
            raise InvalidStateTransitionError(reservation_id, current["status"], "cancelled")

        reservations_repository.update_status(cur, reservation_id, "cancelled")

    log_event(
        logger,
        "reservation cancelled by guest",
        reservation_id=reservation_id,
        previous_status=current["status"],
    )
    return {
        "status": "cancelled",
        "reservation_id": reservation_id,
        "previous_status": current["status"],
    }


def edit_reservation(
    reservation_id: str,
    *,
    status: str,
    check_in: date | None = None,
    check_out: date | None = None,
) -> dict:
    """Staff edit of status and, optionally, dates.

    Dates and status are validated independently:
    - New dates must come as a pair with check_out > check_in. Unless the
      reservation ends up cancelled, they are re-checked for overlap
      excluding this reservation. The total is recomputed from the room's
      current price.
    - The requested status is always applied. Reviving a cancelled
      reservation re-checks availability of its dates, since it re-enters
      the room's overlap set. A status change outside the regular state
      machine is accepted as a staff override and logged.

    Raises:
        InvalidDateRangeError: Partial or inverted date range.
        InvalidStateTransitionError: Unknown status value.
        NotFoundError: Reservation (or its room, when needed) is missing.
        RoomUnavailableError: The resulting interval overlaps another stay.
    """
    if status not in STATUSES:
        raise InvalidStateTransitionError(reservation_id, "unknown", status)

    dates_supplied = check_in is not None or check_out is not None
    if dates_supplied:
        if check_in is None or check_out is None:
            raise InvalidDateRangeError(
                check_in, check_out, "Both check-in and check-out dates are required"
            )
        _validate_range(check_in, check_out)

    with txn() as cur:
        # Plain read first to learn which room to lock (room before reservation)
        snapshot = reservations_repository.get_reservation(cur, reservation_id)
        if snapshot is None:
            raise NotFoundError("reservation", reservation_id)

        room_id = snapshot["room_id"]
        room = rooms_repository.lock_room(cur, room_id) if room_id else None

        current = reservations_repository.lock_reservation(cur, reservation_id)
        if current is None:
            raise NotFoundError("reservation", reservation_id)

        new_checkin = check_in if dates_supplied else current["checkin"]
        new_checkout = check_out if dates_supplied else current["checkout"]
        reviving = current["status"] == "cancelled" and status != "cancelled"

        if dates_supplied or reviving:
            if room is None:
                raise NotFoundError("room", room_id or "(deleted)")
            # A cancelled result is outside the overlap set whatever its dates
            if status != "cancelled":
                conflicting_id = check_room_conflict(
                    cur,
                    room_id=room_id,
                    check_in=new_checkin,
                    check_out=new_checkout,
                    exclude_reservation_id=reservation_id,
                )
                if conflicting_id is not None:
                    raise RoomUnavailableError(room_id, conflicting_id)

        total_cents = current["total_cents"]
        if dates_supplied:
            total_cents = compute_total_cents(
                room["price_per_night_cents"], new_checkin, new_checkout
            )

        if status != current["status"] and not is_allowed_transition(current["status"], status):
            log_event(
                logger,
                "reservation status override",
                level=logging.WARNING,
                reservation_id=reservation_id,
                previous_status=current["status"],
                new_status=status,
            )

        try:
            updated = reservations_repository.update_reservation(
                cur,
                reservation_id,
                status=status,
                checkin=new_checkin,
                checkout=new_checkout,
                total_cents=total_cents,
            )
        except pg_errors.ExclusionViolation as exc:
            raise RoomUnavailableError(room_id) from exc

    log_event(
        logger,
        "reservation edited",
        reservation_id=reservation_id,
        status=status,
        dates_changed=dates_supplied,
        total_cents=total_cents,
    )
    return updated

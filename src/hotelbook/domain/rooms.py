"""Room catalog rules that need more than a single row write."""

from __future__ import annotations

from datetime import date

from hotelbook.domain.errors import NotFoundError, RoomInUseError
from hotelbook.infra.db import txn
from hotelbook.infra.repositories import reservations_repository, rooms_repository
from hotelbook.infra.time import hotel_today
from hotelbook.observability.logging import get_logger, log_event

logger = get_logger(__name__)


def delete_room(room_id: str, *, today: date | None = None) -> None:
    """Remove a room from the catalog.

    A room with a non-cancelled reservation that has not ended yet
    (checkout after today) stays. Past reservations keep their rows with
    room_id set to NULL by the foreign key.

    The room row is locked first so no booking can slip in between the
    check and the delete.

    Raises:
        NotFoundError: No such room.
        RoomInUseError: The room still has current or upcoming stays.
    """
    if today is None:
        today = hotel_today()

    with txn() as cur:
        room = rooms_repository.lock_room(cur, room_id)
        if room is None:
            raise NotFoundError("room", room_id)
        if reservations_repository.has_active_future_reservations(cur, room_id, today):
            raise RoomInUseError(room_id)
        rooms_repository.delete_room(cur, room_id)

    log_event(logger, "room deleted", room_id=room_id, number=room["number"])

"""Tests for room deletion rules."""

from __future__ import annotations

from datetime import date
from unittest.mock import patch

import pytest

from hotelbook.domain.errors import NotFoundError, RoomInUseError
from hotelbook.domain.rooms import delete_room
from tests.helpers import make_room, mock_txn

TODAY = date(2026, 5, 20)


@pytest.fixture
def repos():
    with (
        mock_txn("hotelbook.domain.rooms.txn") as cur,
        patch("hotelbook.domain.rooms.rooms_repository") as rooms_repo,
        patch("hotelbook.domain.rooms.reservations_repository") as res_repo,
    ):
        yield cur, rooms_repo, res_repo


def test_deletes_room_without_upcoming_stays(repos):
    cur, rooms_repo, res_repo = repos
    rooms_repo.lock_room.return_value = make_room(id="room-1")
    res_repo.has_active_future_reservations.return_value = False

    delete_room("room-1", today=TODAY)

    rooms_repo.lock_room.assert_called_once_with(cur, "room-1")
    res_repo.has_active_future_reservations.assert_called_once_with(cur, "room-1", TODAY)
    rooms_repo.delete_room.assert_called_once_with(cur, "room-1")


def test_room_with_upcoming_stay_is_in_use(repos):
    _, rooms_repo, res_repo = repos
    rooms_repo.lock_room.return_value = make_room(id="room-1")
    res_repo.has_active_future_reservations.return_value = True

    with pytest.raises(RoomInUseError):
        delete_room("room-1", today=TODAY)

    rooms_repo.delete_room.assert_not_called()


def test_missing_room(repos):
    _, rooms_repo, _ = repos
    rooms_repo.lock_room.return_value = None

    with pytest.raises(NotFoundError):
        delete_room("room-1", today=TODAY)


def test_today_defaults_to_hotel_calendar(repos):
    cur, rooms_repo, res_repo = repos
    rooms_repo.lock_room.return_value = make_room(id="room-1")
    res_repo.has_active_future_reservations.return_value = False

    with patch("hotelbook.domain.rooms.hotel_today", return_value=TODAY):
        delete_room("room-1")

    res_repo.has_active_future_reservations.assert_called_once_with(cur, "room-1", TODAY)

"""Tests for the occupancy reporter and front desk dashboard."""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from hotelbook.domain.occupancy import (
    dashboard_summary,
    occupancy_rate,
    todays_arrivals,
    todays_departures,
)
from tests.helpers import make_reservation, make_room, mock_txn

TODAY = date(2026, 5, 20)


@pytest.fixture
def cur():
    return MagicMock()


class TestOccupancyRate:
    @pytest.mark.parametrize(
        "occupied, total, expected",
        [
            (0, 8, 0.0),
            (2, 8, 25.0),
            (1, 3, 33.33),
            (2, 3, 66.67),
            (8, 8, 100.0),
        ],
    )
    def test_percentage_rounded_to_two_decimals(self, cur, occupied, total, expected):
        with (
            patch("hotelbook.domain.occupancy.rooms_repository.count_active_rooms", return_value=total),
            patch(
                "hotelbook.domain.occupancy.reservations_repository.count_occupied_rooms",
                return_value=occupied,
            ),
        ):
            assert occupancy_rate(cur, TODAY) == expected

    def test_no_active_rooms_is_zero(self, cur):
        with (
            patch("hotelbook.domain.occupancy.rooms_repository.count_active_rooms", return_value=0),
            patch(
                "hotelbook.domain.occupancy.reservations_repository.count_occupied_rooms"
            ) as occupied,
        ):
            assert occupancy_rate(cur, TODAY) == 0.0
            occupied.assert_not_called()

    def test_occupied_query_covers_night_of_today(self, cur):
        cur.fetchone.side_effect = [(4,), (1,)]

        assert occupancy_rate(cur, TODAY) == 25.0

        sql, params = cur.execute.call_args_list[1][0]
        assert "r.checkin <= %s" in sql
        assert "r.checkout > %s" in sql
        assert "r.status <> 'cancelled'" in sql
        assert "rm.is_active = true" in sql
        assert params == (TODAY, TODAY)


class TestArrivalsAndDepartures:
    def test_arrivals_are_joined_with_guest_and_room(self, cur):
        room = make_room()
        arrival = make_reservation(room_id=room["id"], checkin=TODAY)
        guest = {
            "id": arrival["user_id"],
            "external_subject": "sub",
            "email": "g@example.com",
            "name": "Guest",
            "role": "client",
        }
        with (
            patch(
                "hotelbook.domain.occupancy.reservations_repository.list_arrivals",
                return_value=[arrival],
            ) as list_arrivals,
            patch(
                "hotelbook.domain.related.users_repository.get_users_by_ids",
                return_value={guest["id"]: guest},
            ),
            patch(
                "hotelbook.domain.related.rooms_repository.get_rooms_by_ids",
                return_value={room["id"]: room},
            ),
        ):
            result = todays_arrivals(cur, TODAY)

        list_arrivals.assert_called_once_with(cur, TODAY)
        assert result[0]["room"] == room
        assert result[0]["guest"] == {"id": guest["id"], "name": "Guest", "email": "g@example.com"}

    def test_arrivals_query_excludes_cancelled(self, cur):
        cur.fetchall.return_value = []

        assert todays_arrivals(cur, TODAY) == []

        sql, params = cur.execute.call_args[0]
        assert "checkin = %s" in sql
        assert "status <> 'cancelled'" in sql
        assert "ORDER BY checkin, created_at" in sql
        assert params == (TODAY,)

    def test_departures_query_uses_checkout(self, cur):
        cur.fetchall.return_value = []

        assert todays_departures(cur, TODAY) == []

        sql, params = cur.execute.call_args[0]
        assert "checkout = %s" in sql
        assert "status <> 'cancelled'" in sql
        assert params == (TODAY,)


class TestDashboardSummary:
    def test_summary_for_given_day(self):
        arrival = make_reservation(checkin=TODAY)
        with (
            mock_txn("hotelbook.domain.occupancy.txn") as cur,
            patch("hotelbook.domain.occupancy.todays_arrivals", return_value=[arrival]) as arrivals,
            patch("hotelbook.domain.occupancy.todays_departures", return_value=[]) as departures,
            patch("hotelbook.domain.occupancy.rooms_repository.count_active_rooms", return_value=8),
            patch(
                "hotelbook.domain.occupancy.reservations_repository.count_occupied_rooms",
                return_value=3,
            ),
        ):
            summary = dashboard_summary(TODAY)

        arrivals.assert_called_once_with(cur, TODAY)
        departures.assert_called_once_with(cur, TODAY)
        assert summary == {
            "date": TODAY,
            "arrivals": [arrival],
            "departures": [],
            "total_rooms": 8,
            "occupied_rooms": 3,
            "occupancy_rate": 37.5,
        }

    def test_defaults_to_hotel_today(self):
        with (
            mock_txn("hotelbook.domain.occupancy.txn"),
            patch("hotelbook.domain.occupancy.hotel_today", return_value=TODAY),
            patch("hotelbook.domain.occupancy.todays_arrivals", return_value=[]),
            patch("hotelbook.domain.occupancy.todays_departures", return_value=[]),
            patch("hotelbook.domain.occupancy.rooms_repository.count_active_rooms", return_value=0),
        ):
            summary = dashboard_summary()

        assert summary["date"] == TODAY
        assert summary["occupancy_rate"] == 0.0
        assert summary["occupied_rooms"] == 0

"""Occupancy reporting for the front desk.

All figures are for a single hotel-local day. A stay occupies the nights
from checkin up to, not including, checkout.
"""

from __future__ import annotations

from datetime import date

from psycopg2.extensions import cursor as PgCursor

from hotelbook.domain.related import attach_related
from hotelbook.infra.db import txn
from hotelbook.infra.repositories import reservations_repository, rooms_repository
from hotelbook.infra.time import hotel_today


def todays_arrivals(cur: PgCursor, today: date) -> list[dict]:
    """Non-cancelled reservations checking in today, with guest and room."""
    arrivals = reservations_repository.list_arrivals(cur, today)
    return attach_related(cur, arrivals)


def todays_departures(cur: PgCursor, today: date) -> list[dict]:
    """Non-cancelled reservations checking out today, with guest and room."""
    departures = reservations_repository.list_departures(cur, today)
    return attach_related(cur, departures)


def _rate(occupied: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(occupied / total * 100, 2)


def occupancy_rate(cur: PgCursor, today: date) -> float:
    """Percentage of active rooms occupied on the night of today.

    Rounded to 2 decimals. 0.0 when there are no active rooms.
    """
    total = rooms_repository.count_active_rooms(cur)
    if total == 0:
        return 0.0
    occupied = reservations_repository.count_occupied_rooms(cur, today)
    return _rate(occupied, total)


def dashboard_summary(today: date | None = None) -> dict:
    """Front desk snapshot for one day (defaults to the hotel-local today).

    Returns:
        {
            "date": date,
            "arrivals": [...],
            "departures": [...],
            "total_rooms": int,
            "occupied_rooms": int,
            "occupancy_rate": float,
        }
    """
    if today is None:
        today = hotel_today()

    with txn() as cur:
        arrivals = todays_arrivals(cur, today)
        departures = todays_departures(cur, today)
        total_rooms = rooms_repository.count_active_rooms(cur)
        occupied_rooms = (
            reservations_repository.count_occupied_rooms(cur, today) if total_rooms else 0
        )

    return {
        "date": today,
        "arrivals": arrivals,
        "departures": departures,
        "total_rooms": total_rooms,
        "occupied_rooms": occupied_rooms,
        "occupancy_rate": _rate(occupied_rooms, total_rooms),
    }

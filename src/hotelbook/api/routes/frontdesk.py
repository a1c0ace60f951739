"""Front desk dashboard endpoint."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from hotelbook.api.auth import CurrentUser
from hotelbook.api.rbac import require_receptionist

router = APIRouter(prefix="/frontdesk", tags=["frontdesk"])


@router.get("/dashboard")
def get_dashboard(
    target_date: date | None = Query(None, alias="date", description="Date (YYYY-MM-DD), defaults to today"),
    user: CurrentUser = Depends(require_receptionist),
) -> dict:
    """Arrivals, departures and occupancy for one day.

    Defaults to today in HOTEL_TIMEZONE. Each arrival and departure carries
    its guest (id, name, email) and room.
    """
    from hotelbook.domain.occupancy import dashboard_summary

    return dashboard_summary(target_date)

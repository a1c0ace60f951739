"""Tests for time utilities."""

from datetime import datetime, timezone
from unittest.mock import patch
from zoneinfo import ZoneInfo


class TestUtcNow:
    def test_returns_utc_datetime(self):
        from hotelbook.infra.time import utc_now

        assert utc_now().tzinfo == timezone.utc

    def test_returns_current_time(self):
        from hotelbook.infra.time import utc_now

        before = datetime.now(timezone.utc)
        now = utc_now()
        after = datetime.now(timezone.utc)

        assert before <= now <= after


class TestHotelTimezone:
    def test_defaults_to_utc(self, monkeypatch):
        from hotelbook.infra.time import hotel_timezone

        monkeypatch.delenv("HOTEL_TIMEZONE", raising=False)

        assert hotel_timezone() == ZoneInfo("UTC")

    def test_reads_env(self, monkeypatch):
        from hotelbook.infra.time import hotel_timezone

        monkeypatch.setenv("HOTEL_TIMEZONE", "Europe/Paris")

        assert hotel_timezone() == ZoneInfo("Europe/Paris")

    def test_invalid_falls_back_to_utc(self, monkeypatch):
        from hotelbook.infra.time import hotel_timezone

        monkeypatch.setenv("HOTEL_TIMEZONE", "Mars/Olympus_Mons")

        assert hotel_timezone() == ZoneInfo("UTC")


class TestHotelToday:
    def test_date_follows_hotel_timezone(self, monkeypatch):
        from hotelbook.infra.time import hotel_today

        # 02:30 UTC on the 1st is still the evening of the 31st in New York
        fixed = datetime(2026, 1, 1, 2, 30, tzinfo=timezone.utc)
        monkeypatch.setenv("HOTEL_TIMEZONE", "America/New_York")

        with patch("hotelbook.infra.time.utc_now", return_value=fixed):
            assert hotel_today().isoformat() == "2025-12-31"

    def test_utc_date(self, monkeypatch):
        from hotelbook.infra.time import hotel_today

        fixed = datetime(2026, 1, 1, 2, 30, tzinfo=timezone.utc)
        monkeypatch.delenv("HOTEL_TIMEZONE", raising=False)

        with patch("hotelbook.infra.time.utc_now", return_value=fixed):
            assert hotel_today().isoformat() == "2026-01-01"

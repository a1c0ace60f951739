"""Tests for the app factory: health, correlation IDs, storage failures."""

from __future__ import annotations

import io
import json
import logging
from unittest.mock import patch

import psycopg2
from fastapi.testclient import TestClient

from hotelbook.api.app import app as module_app
from hotelbook.api.auth import get_current_user
from hotelbook.api.factory import create_app
from hotelbook.infra.db import PersistenceFailure
from hotelbook.observability.logging import JsonFormatter
from tests.helpers import make_user


class TestHealth:
    def test_health_returns_ok(self):
        client = TestClient(module_app)

        resp = client.get("/health")

        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_docs_disabled(self):
        client = TestClient(create_app())

        assert client.get("/docs").status_code == 404


class TestCorrelationId:
    def test_generates_correlation_id(self):
        resp = TestClient(create_app()).get("/health")

        cid = resp.headers["X-Correlation-ID"]
        assert len(cid) == 32
        int(cid, 16)

    def test_preserves_incoming_correlation_id(self):
        resp = TestClient(create_app()).get("/health", headers={"X-Correlation-ID": "test-123"})

        assert resp.headers["X-Correlation-ID"] == "test-123"

    def test_replaces_oversized_correlation_id(self):
        resp = TestClient(create_app()).get("/health", headers={"X-Correlation-ID": "x" * 500})

        assert resp.headers["X-Correlation-ID"] != "x" * 500
        assert len(resp.headers["X-Correlation-ID"]) == 32


class TestPersistenceFailure:
    def _client(self) -> TestClient:
        app = create_app()
        app.dependency_overrides[get_current_user] = lambda: make_user("receptionist")
        return TestClient(app, raise_server_exceptions=False)

    def test_mapped_to_503_with_retry_after(self):
        failure = PersistenceFailure("database operation failed or timed out")
        failure.__cause__ = psycopg2.OperationalError("canceling statement due to lock timeout")

        with patch("hotelbook.domain.occupancy.dashboard_summary", side_effect=failure):
            resp = self._client().get("/frontdesk/dashboard")

        assert resp.status_code == 503
        assert resp.headers["Retry-After"] == "1"
        assert resp.json() == {"detail": "Service temporarily unavailable"}

    def test_non_retryable_has_no_retry_after(self):
        with patch(
            "hotelbook.domain.occupancy.dashboard_summary",
            side_effect=PersistenceFailure("broken", retryable=False),
        ):
            resp = self._client().get("/frontdesk/dashboard")

        assert resp.status_code == 503
        assert "Retry-After" not in resp.headers

    def test_failure_logged_with_correlation_id(self):
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(JsonFormatter())
        factory_logger = logging.getLogger("hotelbook.api.factory")
        factory_logger.addHandler(handler)
        try:
            with patch(
                "hotelbook.domain.occupancy.dashboard_summary",
                side_effect=PersistenceFailure("down"),
            ):
                self._client().get("/frontdesk/dashboard", headers={"X-Correlation-ID": "cid-503"})
        finally:
            factory_logger.removeHandler(handler)

        lines = [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]
        failure_logs = [line for line in lines if line["message"] == "persistence failure"]
        assert failure_logs
        assert failure_logs[0]["correlationId"] == "cid-503"
        assert failure_logs[0]["level"] == "ERROR"
        assert failure_logs[0]["path"] == "/frontdesk/dashboard"

"""Shared test helpers (plain functions, not fixtures)."""

from __future__ import annotations

import base64
import time
from contextlib import contextmanager
from datetime import date, datetime, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import jwt
from cryptography.hazmat.primitives.asymmetric import rsa

ISSUER = "https://idp.example.com"
AUDIENCE = "hotelbook-api"
JWKS_URL = "https://idp.example.com/.well-known/jwks.json"


def _generate_rsa_keypair():
    """Generate RSA key pair for test JWT signing."""
    private_key = rsa.generate_private_key(
        public_exponent=65537,
        key_size=2048,
    )
    return private_key, private_key.public_key()


def _create_jwks(public_key, kid: str = "test-key-1") -> dict:
    """Create JWKS from public key."""
    public_numbers = public_key.public_numbers()

    def int_to_base64(n: int) -> str:
        byte_length = (n.bit_length() + 7) // 8
        return (
            base64.urlsafe_b64encode(n.to_bytes(byte_length, "big"))
            .rstrip(b"=")
            .decode()
        )

    return {
        "keys": [
            {
                "kty": "RSA",
                "use": "sig",
                "alg": "RS256",
                "kid": kid,
                "n": int_to_base64(public_numbers.n),
                "e": int_to_base64(public_numbers.e),
            }
        ]
    }


def _create_token(
    private_key,
    kid: str = "test-key-1",
    sub: str = "user-123",
    iss: str = ISSUER,
    aud: str = AUDIENCE,
    exp: int | None = None,
    azp: str | None = None,
) -> str:
    """Create signed JWT for testing."""
    now = int(time.time())
    payload = {
        "sub": sub,
        "iss": iss,
        "aud": aud,
        "exp": exp if exp is not None else now + 3600,
        "iat": now,
    }
    if azp:
        payload["azp"] = azp

    return jwt.encode(payload, private_key, algorithm="RS256", headers={"kid": kid})


def oidc_env() -> dict:
    return {
        "OIDC_ISSUER": ISSUER,
        "OIDC_AUDIENCE": AUDIENCE,
        "OIDC_JWKS_URL": JWKS_URL,
    }


def make_user(role: str = "client", **overrides):
    from hotelbook.api.auth import CurrentUser

    fields = {
        "id": str(uuid4()),
        "external_subject": f"{role}-sub",
        "email": f"{role}@example.com",
        "name": f"Test {role.capitalize()}",
        "role": role,
    }
    fields.update(overrides)
    return CurrentUser(**fields)


def make_room(**overrides) -> dict:
    room = {
        "id": str(uuid4()),
        "number": "101",
        "room_type": "Double",
        "capacity": 2,
        "price_per_night_cents": 10000,
        "is_active": True,
    }
    room.update(overrides)
    return room


def room_row(room: dict) -> tuple:
    """Cursor row for rooms_repository.ROOM_COLUMNS."""
    return (
        room["id"],
        room["number"],
        room["room_type"],
        room["capacity"],
        room["price_per_night_cents"],
        room["is_active"],
    )


def make_reservation(**overrides) -> dict:
    now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    reservation = {
        "id": str(uuid4()),
        "user_id": str(uuid4()),
        "room_id": str(uuid4()),
        "checkin": date(2026, 3, 10),
        "checkout": date(2026, 3, 13),
        "status": "pending",
        "total_cents": 30000,
        "created_at": now,
        "updated_at": now,
    }
    reservation.update(overrides)
    return reservation


def reservation_row(reservation: dict) -> tuple:
    """Cursor row for reservations_repository.RESERVATION_COLUMNS."""
    return (
        reservation["id"],
        reservation["user_id"],
        reservation["room_id"],
        reservation["checkin"],
        reservation["checkout"],
        reservation["status"],
        reservation["total_cents"],
        reservation["created_at"],
        reservation["updated_at"],
    )


@contextmanager
def mock_txn(target: str, cur: MagicMock | None = None):
    """Patch a txn() reference so `with txn() as cur` yields a MagicMock cursor."""
    from unittest.mock import patch

    cur = cur if cur is not None else MagicMock()
    with patch(target) as txn:
        txn.return_value.__enter__.return_value = cur
        txn.return_value.__exit__.return_value = False
        yield cur

"""Store-level guard against double booking.

EXCLUDE USING GIST constraint: two non-cancelled reservations of the same
room cannot have overlapping [checkin, checkout) ranges. Backs up the
row lock taken by the booking workflow, so the invariant holds even for
writes that bypass it.

daterange('[)') matches the application rule: checkout_A == checkin_B is
not a conflict (same-day turnover).

Revision ID: 002_no_room_overlap_constraint
Revises: 001_initial_schema
Create Date: 2026-10-05
"""
from __future__ import annotations

from pathlib import Path

from alembic import op

revision = "002_no_room_overlap_constraint"
down_revision = "001_initial_schema"
branch_labels = None
depends_on = None

_SQL_FILE = Path(__file__).resolve().parent.parent / "sql" / "002_no_room_overlap_constraint.sql"


def upgrade() -> None:
    op.execute(_SQL_FILE.read_text(encoding="utf-8"))


def downgrade() -> None:
    op.execute("ALTER TABLE reservations DROP CONSTRAINT IF EXISTS no_room_overlap")

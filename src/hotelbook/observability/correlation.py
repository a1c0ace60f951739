"""Correlation IDs: one per request, visible to every log record it emits."""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

CORRELATION_ID_HEADER = "X-Correlation-ID"

# Inbound IDs longer than this are replaced rather than trusted
_MAX_INBOUND_LENGTH = 128

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def new_correlation_id() -> str:
    return uuid.uuid4().hex


def get_correlation_id() -> str:
    """Correlation ID of the current request, or "" outside of one."""
    return _correlation_id.get()


def accept_inbound(value: str | None) -> str:
    """Reuse the caller's correlation ID when it is sane, otherwise mint one."""
    if value and len(value) <= _MAX_INBOUND_LENGTH and value.isprintable():
        return value
    return new_correlation_id()


@contextmanager
def correlation_scope(cid: str) -> Iterator[str]:
    """Bind cid as the current correlation ID until the block exits."""
    token = _correlation_id.set(cid)
    try:
        yield cid
    finally:
        _correlation_id.reset(token)

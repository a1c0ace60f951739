"""Auth routes - user identity endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from hotelbook.api.auth import CurrentUser, get_current_user, get_token_subject
from hotelbook.observability.logging import get_logger, log_event

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

# Unique constraints on users -> 409 detail
_DUPLICATE_USER_DETAILS = {
    "uq_users_external_subject": "User already registered",
    "uq_users_email_lower": "Email already registered",
}


class RegisterRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=254, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@router.get("/whoami")
def whoami(user: CurrentUser = Depends(get_current_user)) -> dict:
    """Return authenticated user info.

    Returns:
        User info: id, external_subject, email, name, role.
    """
    return {
        "id": user.id,
        "external_subject": user.external_subject,
        "email": user.email,
        "name": user.name,
        "role": user.role,
    }


@router.post("/register", status_code=201)
def register(body: RegisterRequest, sub: str = Depends(get_token_subject)) -> dict:
    """Provision a local 'client' user for a verified token subject.

    Receptionists are provisioned by operators, never through this route.
    Fails with 409 if the subject already has a user or the e-mail is taken.
    """
    from psycopg2 import errors as pg_errors

    from hotelbook.infra.db import txn
    from hotelbook.infra.repositories.users_repository import get_user_by_subject, insert_user

    try:
        with txn() as cur:
            if get_user_by_subject(cur, sub) is not None:
                raise HTTPException(status_code=409, detail="User already registered")
            user = insert_user(
                cur,
                external_subject=sub,
                name=body.name.strip(),
                email=body.email,
                role="client",
            )
    except pg_errors.UniqueViolation as exc:
        detail = _DUPLICATE_USER_DETAILS.get(exc.diag.constraint_name, "User already exists")
        raise HTTPException(status_code=409, detail=detail)

    log_event(logger, "user registered", user_id=user["id"], role=user["role"])
    return user

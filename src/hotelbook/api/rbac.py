"""Role gate.

Two roles: 'client' (guests booking for themselves) and 'receptionist'
(front desk staff). There is no hierarchy; each endpoint names the roles
it admits.
"""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, HTTPException

from hotelbook.api.auth import CurrentUser, get_current_user

ROLES = ("client", "receptionist")


def require_role(*roles: str) -> Callable[..., CurrentUser]:
    """Create a dependency that admits only users holding one of roles.

    Usage:
        @router.get("/something")
        def endpoint(user: CurrentUser = Depends(require_role("receptionist"))):
            ...
    """
    unknown = [role for role in roles if role not in ROLES]
    if not roles or unknown:
        raise ValueError(f"Invalid role(s): {unknown or 'none given'}")

    def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            raise HTTPException(status_code=403, detail="Insufficient role")
        return user

    return dependency


require_client = require_role("client")
require_receptionist = require_role("receptionist")

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Callable, Optional
from app.core.security import Principal, decode_principal, authorize
from app.modules.users.models import Role

# auto_error is off so a missing token surfaces as UnauthenticatedError
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Principal:
    """
    Get current authenticated principal from JWT token.

    Login takes a JSON body, so in the docs UI the token returned by
    /auth/login is pasted into Authorize by hand.
    """
    token = credentials.credentials if credentials else None
    return decode_principal(token)


def require_role(role: Role) -> Callable:
    """Build a dependency that only lets principals holding role through"""

    async def checker(
        principal: Principal = Depends(get_current_principal)
    ) -> Principal:
        return authorize(principal, role)

    return checker


require_admin = require_role(Role.ADMIN)

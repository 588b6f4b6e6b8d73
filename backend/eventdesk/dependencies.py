"""Request-level auth dependencies.

``get_principal`` authenticates the bearer token; ``require_roles`` builds a
second-stage check for routes restricted to specific roles.
"""
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from eventdesk.errors import Forbidden, InvalidToken, Unauthenticated
from eventdesk.models.user import Role
from eventdesk.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Decoded claims of the calling user."""

    user_id: str
    username: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.admin


def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """Authenticate the request from its ``Authorization: Bearer`` header."""
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise Unauthenticated()
    claims = decode_access_token(credentials.credentials)
    try:
        role = Role(claims["role"])
    except ValueError:
        raise InvalidToken()
    return Principal(
        user_id=claims["sub"],
        username=claims.get("username", ""),
        role=role,
    )


def require_roles(*roles: Role):
    """Build a dependency that rejects principals whose role is not in ``roles``."""
    allowed = frozenset(roles)

    def _check(principal: Principal = Depends(get_principal)) -> Principal:
        if principal.role not in allowed:
            raise Forbidden(f"Access denied. Requires role: {', '.join(sorted(r.value for r in allowed))}")
        return principal

    return _check


CurrentPrincipal = Annotated[Principal, Depends(get_principal)]
AdminPrincipal = Annotated[Principal, Depends(require_roles(Role.admin))]
OrganizerPrincipal = Annotated[Principal, Depends(require_roles(Role.organizer, Role.admin))]

"""Role checks for caller-facing operations."""

from typing import Optional

from smarthire.core.exceptions import AuthorizationError, NotFoundError
from smarthire.data.models import User
from smarthire.utils.constants import AuditAction, UserRole
from smarthire.utils.logger import audit_log


def require_role(user: Optional[User], *roles: UserRole | str) -> User:
    """
    Ensure a user holds one of the given roles.

    Returns the user so calls can be chained.

    Raises:
        NotFoundError: user is None
        AuthorizationError: user holds none of the roles
    """
    if user is None:
        raise NotFoundError("user", "unknown")
    if not user.has_role(*roles):
        allowed = ", ".join(getattr(r, "value", r) for r in roles)
        audit_log(
            AuditAction.ACCESS_DENIED.value,
            {"user_id": str(user.id), "role": user.role, "required": allowed},
            audit_type="ACCESS",
        )
        raise AuthorizationError(
            f"User role {user.role} is not authorized (requires {allowed})",
            role=user.role,
        )
    return user

from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from studyhub.core.database import get_db
from studyhub.models.user import User, UserRole


def get_current_user(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the caller forwarded by the authentication gateway.

    Password and session handling happen upstream; this service only trusts
    the user id the gateway puts in the X-User-Id header.
    """
    if not x_user_id or not x_user_id.strip().isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    user = db.query(User).filter(User.id == int(x_user_id)).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return user


def require_onboarding(user: User = Depends(get_current_user)) -> User:
    """Require a user who has finished onboarding (and so has a role)."""
    if not user.onboarding_completed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Please complete onboarding first",
        )
    return user


def require_role(*roles: UserRole):
    """Build a dependency that admits only onboarded users holding one of `roles`.

    Usage:
        @router.get("/users")
        def list_users(user: User = Depends(require_role(UserRole.admin))): ...
    """
    allowed = set(roles)

    def dependency(user: User = Depends(require_onboarding)) -> User:
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied",
            )
        return user

    return dependency


require_admin = require_role(UserRole.admin)

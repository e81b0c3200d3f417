from __future__ import annotations

from collections.abc import Callable

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from backend.app.core.database import get_db
from backend.app.core.exceptions import AuthError
from backend.app.models.user import RoleEnum, User
from backend.app.services.auth import authorize, resolve_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_current_user(
    db: Session = Depends(get_db),
    token: str | None = Depends(oauth2_scheme),
) -> User:
    if not token:
        raise AuthError("Access token required")
    return resolve_token(db, token)


def require_role(*roles: RoleEnum) -> Callable[..., User]:
    """FastAPI dependency factory: user must hold one of *roles*.

    Returns the authenticated ``User`` so the endpoint can use it::

        current_user = Depends(require_role(RoleEnum.ADMIN))
    """

    def _checker(current_user: User = Depends(get_current_user)) -> User:
        authorize(current_user, *roles)
        return current_user

    return _checker


require_admin = require_role(RoleEnum.ADMIN)

"""Authentication and authorization for cashiers and store admins."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.core.database import transaction
from backend.app.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidTokenError,
)
from backend.app.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from backend.app.models.user import RoleEnum, User

logger = logging.getLogger(__name__)

# Verified against when the username is unknown so both failure paths cost a hash.
_DUMMY_HASH = get_password_hash("not-a-real-password")


def authenticate(db: Session, username: str, password: str) -> User:
    """Return the user for a correct username/password pair."""
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        verify_password(password, _DUMMY_HASH)
        raise InvalidCredentialsError()
    if not verify_password(password, user.hashed_password):
        logger.info("Failed login for %s", username)
        raise InvalidCredentialsError()
    return user


def authorize(user: User, *roles: RoleEnum) -> None:
    """Raise ``ForbiddenError`` unless *user* holds one of *roles*."""
    if user.role not in roles:
        if roles == (RoleEnum.ADMIN,):
            raise ForbiddenError("Admin access required")
        raise ForbiddenError(
            f"Requires role: {', '.join(r.value for r in roles)}"
        )


def issue_token(user: User) -> str:
    return create_access_token(
        user_id=user.id, username=user.username, role=user.role.value
    )


def resolve_token(db: Session, token: str) -> User:
    """Map a bearer token back to a live user row."""
    payload = decode_access_token(token)
    user = db.get(User, int(payload["sub"]))
    if user is None:
        raise InvalidTokenError()
    return user


def register_user(
    db: Session,
    *,
    username: str,
    password: str,
    role: RoleEnum = RoleEnum.CASHIER,
) -> User:
    """Create a user account. Raises ConflictError if the username is taken."""
    if db.query(User).filter(User.username == username).first():
        raise ConflictError("Username already exists")

    user = User(
        username=username,
        hashed_password=get_password_hash(password),
        role=role,
    )
    try:
        with transaction(db):
            db.add(user)
    except IntegrityError:
        raise ConflictError("Username already exists")
    db.refresh(user)
    logger.info("Registered %s user %s", role.value, username)
    return user

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.api.deps import get_current_user, require_admin
from backend.app.core.database import get_db
from backend.app.models.user import User
from backend.app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserDetailOut,
)
from backend.app.schemas.common import MessageOut
from backend.app.services.auth import authenticate, issue_token, register_user

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
) -> dict:
    user = authenticate(db, payload.username, payload.password)
    return {"token": issue_token(user), "user": user}


@router.post("/register", response_model=MessageOut)
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> dict[str, str]:
    register_user(
        db,
        username=payload.username,
        password=payload.password,
        role=payload.role,
    )
    return {"message": "User created successfully"}


@router.get("/me", response_model=UserDetailOut)
def read_me(current_user: User = Depends(get_current_user)) -> User:
    return current_user

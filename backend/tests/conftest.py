"""Shared test fixtures.

Each test gets its own SQLite database file, so service code can commit
normally and tests never pollute each other.
"""

from __future__ import annotations

import os

# The app reads settings at import time; keep its lifespan engine in memory.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from decimal import Decimal
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

import backend.app.models.pos  # noqa: F401
from backend.app.core.database import (
    Base,
    create_db_engine,
    create_session_factory,
    get_db,
)
from backend.app.core.security import get_password_hash
from backend.app.main import app
from backend.app.models.inventory import Product
from backend.app.models.user import RoleEnum, User
from backend.app.services.auth import issue_token


# ─── Database per test ────────────────────────────────────────────────────────


@pytest.fixture()
def engine(tmp_path: Path) -> Generator[Engine, None, None]:
    engine = create_db_engine(
        f"sqlite:///{tmp_path / 'pos.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return create_session_factory(engine)


@pytest.fixture()
def db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def client(session_factory: sessionmaker[Session]) -> Generator[TestClient, None, None]:
    """FastAPI TestClient whose requests use the per-test database."""

    def _override_get_db() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ─── Auth helpers ─────────────────────────────────────────────────────────────


def _make_user(db: Session, username: str, role: RoleEnum) -> User:
    user = User(
        username=username,
        hashed_password=get_password_hash("pass"),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def admin_user(db: Session) -> User:
    return _make_user(db, "test_admin", RoleEnum.ADMIN)


@pytest.fixture()
def cashier_user(db: Session) -> User:
    return _make_user(db, "test_cashier", RoleEnum.CASHIER)


@pytest.fixture()
def admin_token(admin_user: User) -> str:
    return issue_token(admin_user)


@pytest.fixture()
def cashier_token(cashier_user: User) -> str:
    return issue_token(cashier_user)


def auth(token: str) -> dict[str, str]:
    """Return Authorization header dict."""
    return {"Authorization": f"Bearer {token}"}


# ─── Inventory fixtures ───────────────────────────────────────────────────────


def _make_product(db: Session, **fields: object) -> Product:
    product = Product(**fields)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@pytest.fixture()
def rice(db: Session) -> Product:
    return _make_product(
        db,
        name="Rice (1kg)",
        barcode="7901234567890",
        price=Decimal("55.00"),
        stock=50,
        category="Staples",
    )


@pytest.fixture()
def cola(db: Session) -> Product:
    return _make_product(
        db,
        name="Coca Cola 350ml",
        barcode="7901234567892",
        price=Decimal("25.00"),
        stock=30,
        category="Beverages",
    )


@pytest.fixture()
def last_unit(db: Session) -> Product:
    """A product with exactly one unit on hand."""
    return _make_product(
        db,
        name="Bread Loaf",
        barcode="7901234567894",
        price=Decimal("45.00"),
        stock=1,
        category="Food",
    )

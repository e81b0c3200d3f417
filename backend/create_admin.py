"""One-time script to create an admin user.

Usage:
    python -m backend.create_admin
"""

from __future__ import annotations

import getpass

from backend.app.core.config import settings
from backend.app.core.database import create_db_engine, create_session_factory
from backend.app.core.security import get_password_hash
from backend.app.models.pos import RoleEnum, User


def main() -> None:
    username = input("Username [admin]: ").strip() or "admin"
    password = getpass.getpass("Password: ")
    if not password:
        print("Error: password cannot be empty.")
        return

    engine = create_db_engine(settings.database_url)
    db = create_session_factory(engine)()
    try:
        existing = db.query(User).filter(User.username == username).first()
        if existing:
            # Reset password and promote to admin
            existing.hashed_password = get_password_hash(password)
            existing.role = RoleEnum.ADMIN
            db.commit()
            print("Admin user already exists, password reset!")
            print(f"  ID:       {existing.id}")
            print(f"  Username: {username}")
            print("  Role:     admin")
            return

        user = User(
            username=username,
            hashed_password=get_password_hash(password),
            role=RoleEnum.ADMIN,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        print("Admin user created successfully!")
        print(f"  ID:       {user.id}")
        print(f"  Username: {username}")
        print("  Role:     admin")
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    main()

"""Create the schema, the default admin and the starter catalogue.

Usage:
    python -m backend.scripts.seed
"""

from __future__ import annotations

from decimal import Decimal

from backend.app.core.config import settings
from backend.app.core.database import Base, create_db_engine, create_session_factory
from backend.app.core.security import get_password_hash
from backend.app.models.pos import Product, RoleEnum, User

DEFAULT_ADMIN = ("admin", "admin123")

PRODUCTS: list[tuple[str, str, Decimal, int, str]] = [
    ("Rice (1kg)", "7901234567890", Decimal("55.00"), 50, "Staples"),
    ("Instant Noodles", "7901234567891", Decimal("12.00"), 100, "Food"),
    ("Coca Cola 350ml", "7901234567892", Decimal("25.00"), 30, "Beverages"),
    ("Shampoo Sachet", "7901234567893", Decimal("8.50"), 200, "Personal Care"),
    ("Bread Loaf", "7901234567894", Decimal("45.00"), 15, "Food"),
    ("Cooking Oil 1L", "7901234567895", Decimal("85.00"), 25, "Cooking"),
    ("Sugar 1kg", "7901234567896", Decimal("60.00"), 30, "Staples"),
    ("Coffee 3-in-1", "7901234567897", Decimal("7.00"), 150, "Beverages"),
]


def main() -> None:
    engine = create_db_engine(settings.database_url)
    Base.metadata.create_all(engine)
    db = create_session_factory(engine)()
    try:
        username, password = DEFAULT_ADMIN
        if not db.query(User).filter(User.username == username).first():
            db.add(User(
                username=username,
                hashed_password=get_password_hash(password),
                role=RoleEnum.ADMIN,
            ))
            print(f"  Created admin user (username: {username}, password: {password})")
        else:
            print(f"  Admin user '{username}' already exists")

        added = 0
        for name, barcode, price, stock, category in PRODUCTS:
            if db.query(Product).filter(Product.barcode == barcode).first():
                continue
            db.add(Product(
                name=name, barcode=barcode, price=price, stock=stock, category=category,
            ))
            added += 1
        db.commit()
        print(f"  Added {added} sample product(s)")
    finally:
        db.close()
        engine.dispose()

    print("Seed complete.")


if __name__ == "__main__":
    main()

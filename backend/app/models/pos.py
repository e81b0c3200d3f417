# backend/app/models/pos.py: model registry
#
# Importing this module registers every mapped class on ``Base.metadata`` so
# string-based relationships resolve and ``create_all`` sees all tables.

from backend.app.models.inventory import Product
from backend.app.models.sales import Sale, SaleItem
from backend.app.models.user import RoleEnum, User

__all__ = [
    "Product",
    "RoleEnum",
    "Sale",
    "SaleItem",
    "User",
]

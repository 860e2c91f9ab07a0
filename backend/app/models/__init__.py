"""ORM Models — SQLAlchemy declarative models for products, sales and users.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every table keys on a UUID `id` column

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from app.models.product import Product  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.sale import Sale  # noqa: F401

"""Sale ORM — one order of one product by one user.

Invariants:
    - date is set at creation (UTC) and searched by whole local day
    - delivery_status is one of DeliveryStatus (Placed on creation)
    - product/user references survive deletion of the referenced row as NULL

Design Decisions:
    - product and user loaded with selectin: listing projects them without
      extra round-trips and without lazy loads in async context
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.core.domain_types import DeliveryStatus
from app.db.base import Base


class Sale(Base):
    __tablename__ = "sales"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    product_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    address: Mapped[str] = mapped_column(String(100), nullable=False)
    delivery_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DeliveryStatus.PLACED.value,
    )

    # Relationships
    product: Mapped["Product"] = relationship("Product", lazy="selectin")
    user: Mapped["User"] = relationship("User", lazy="selectin")

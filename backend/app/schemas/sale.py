"""Sale Schemas — order payloads and the nested sale view."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.domain_types import MAX_QUANTITY

from app.schemas.product import ProductResponse
from app.schemas.user import UserResponse


class SaleWrite(BaseModel):
    """Create/update body. Date and delivery status are server-controlled."""
    product: UUID
    user: UUID
    quantity: int = Field(ge=1, le=MAX_QUANTITY)
    address: str = Field(min_length=1, max_length=100)


class DeliveryStatusUpdate(BaseModel):
    # Checked against DeliveryStatus in the service for a domain error message
    delivery_status: str = Field(min_length=1, max_length=100)


class SaleResponse(BaseModel):
    id: UUID
    date: datetime
    quantity: int
    address: str
    delivery_status: str
    product: ProductResponse | None = None
    user: UserResponse | None = None

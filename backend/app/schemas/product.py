"""Product Schemas — field limits mirror the products table."""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.core.domain_types import MAX_QUANTITY


class ProductUpdate(BaseModel):
    """Editable product fields. Stock has its own endpoint."""
    name: str = Field(min_length=1, max_length=100)
    price: float
    description: str = Field(min_length=1)
    category: str = Field(min_length=1, max_length=100)

    @field_validator("name", "category")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty or whitespace")
        return v


class ProductCreate(ProductUpdate):
    stock: int = Field(ge=0, le=MAX_QUANTITY)


class StockUpdate(BaseModel):
    stock: int = Field(ge=0, le=MAX_QUANTITY)


class ProductResponse(BaseModel):
    id: UUID
    name: str
    price: float
    description: str
    category: str
    stock: int

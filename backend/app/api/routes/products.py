"""Product Routes — catalogue CRUD, stock updates and paginated listing."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, listing_query
from app.core.pager import ListingQuery
from app.infrastructure.database import get_db
from app.schemas.listing import IdResponse, PageResponse
from app.schemas.product import (
    ProductCreate, ProductResponse, ProductUpdate, StockUpdate,
)
from app.services.products import ProductService

router = APIRouter(
    prefix="/api/v1/products",
    tags=["products"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=PageResponse[ProductResponse])
async def list_products(
    query: ListingQuery = Depends(listing_query),
    db: AsyncSession = Depends(get_db),
):
    """List products. `sort=price:desc`, `search=name:shoe`."""
    result = await ProductService(db).list_products(query)
    return result.to_dict()


@router.post(
    "", response_model=ProductResponse, status_code=status.HTTP_201_CREATED,
)
async def create_product(
    body: ProductCreate, db: AsyncSession = Depends(get_db),
):
    return await ProductService(db).create_product(body.model_dump())


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: UUID, db: AsyncSession = Depends(get_db)):
    return await ProductService(db).get_product(product_id)


@router.put("/{product_id}", response_model=IdResponse)
async def update_product(
    product_id: UUID, body: ProductUpdate, db: AsyncSession = Depends(get_db),
):
    updated = await ProductService(db).update_product(product_id, body.model_dump())
    return {"id": str(updated)}


@router.delete("/{product_id}", response_model=IdResponse)
async def delete_product(product_id: UUID, db: AsyncSession = Depends(get_db)):
    deleted = await ProductService(db).delete_product(product_id)
    return {"id": str(deleted)}


@router.patch("/{product_id}/stock", response_model=IdResponse)
async def update_stock(
    product_id: UUID, body: StockUpdate, db: AsyncSession = Depends(get_db),
):
    updated = await ProductService(db).update_stock(product_id, body.stock)
    return {"id": str(updated)}

"""Product Service — catalogue CRUD and stock updates.

Invariants:
    - Product names are unique (checked here, enforced again by the DB constraint)
    - update_product never touches stock; update_stock is the only stock writer
      outside sale creation
"""

import logging
from typing import Any, Mapping
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import MatchOperator, ProductId
from app.core.errors import ConflictError, ResourceNotFoundError
from app.core.pager import ListingQuery
from app.core.projection import PRODUCT, project
from app.core.query_builder import FieldFilter
from app.infrastructure.entity_accessor import SqlEntityAccessor
from app.models.product import Product
from app.services.listing import PageResult, list_page

logger = logging.getLogger(__name__)


class ProductService:
    """Products CRUD over a SqlEntityAccessor."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.products = SqlEntityAccessor(db, Product)

    async def list_products(self, query: ListingQuery) -> PageResult:
        return await list_page(self.products, query, PRODUCT)

    async def get_product(self, product_id: UUID) -> dict:
        return project(await self.get_product_or_404(product_id), PRODUCT)

    async def get_product_or_404(self, product_id: UUID) -> Product:
        product = await self.products.find_by_id(product_id)
        if product is None:
            raise ResourceNotFoundError("Product", str(product_id))
        return product

    async def create_product(self, fields: Mapping[str, Any]) -> dict:
        await self._ensure_name_available(fields["name"])
        product_id = await self.products.insert(fields)
        await self.db.commit()
        logger.info(
            f"Product {product_id} created",
            extra={"entity": "Product", "entity_id": str(product_id)},
        )
        return await self.get_product(product_id)

    async def update_product(
        self, product_id: UUID, fields: Mapping[str, Any],
    ) -> ProductId:
        await self.get_product_or_404(product_id)
        await self._ensure_name_available(fields["name"], exclude_id=product_id)
        await self.products.update_by_id(product_id, fields)
        await self.db.commit()
        return ProductId(product_id)

    async def delete_product(self, product_id: UUID) -> ProductId:
        if not await self.products.delete_by_id(product_id):
            raise ResourceNotFoundError("Product", str(product_id))
        await self.db.commit()
        logger.info(
            f"Product {product_id} deleted",
            extra={"entity": "Product", "entity_id": str(product_id)},
        )
        return ProductId(product_id)

    async def update_stock(self, product_id: UUID, stock: int) -> ProductId:
        if not await self.products.update_by_id(product_id, {"stock": stock}):
            raise ResourceNotFoundError("Product", str(product_id))
        await self.db.commit()
        return ProductId(product_id)

    async def _ensure_name_available(
        self, name: str, exclude_id: UUID | None = None,
    ) -> None:
        existing = await self.products.find_one(
            (FieldFilter("name", MatchOperator.EQUALS, name),),
        )
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(
                "Product with the same name is already created", field_name="name",
            )

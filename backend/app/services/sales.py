"""Sales Service — orders, stock decrement and delivery status.

Invariants:
    - A sale references an existing product and an existing user at write time
    - create_sale reserves stock with one conditional UPDATE (stock >= quantity)
      in the same transaction as the insert: concurrent sales never oversell
      and stock never goes below zero
    - update_sale does not rebalance stock (quantity edits are bookkeeping only)
    - delivery_status is always a DeliveryStatus value
    - Per-user listings are always scoped to the user, whatever the search says

Design Decisions:
    - Relationship objects (not bare ids) are written on insert/update so the
      projection never triggers a lazy load in async context
"""

import logging
from datetime import datetime, timezone, tzinfo
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import DeliveryStatus, MatchOperator, SaleId
from app.core.errors import (
    InsufficientStockError, ResourceNotFoundError, ValidationFailedError,
)
from app.core.pager import ListingQuery
from app.core.projection import SALE, project
from app.core.query_builder import FieldFilter
from app.infrastructure.entity_accessor import SqlEntityAccessor
from app.models.product import Product
from app.models.sale import Sale
from app.models.user import User
from app.services.listing import PageResult, list_page
from app.services.users import HIDDEN_USER_FIELDS

logger = logging.getLogger(__name__)


class SalesService:
    """Sales CRUD plus the product/user checks a sale depends on."""

    def __init__(self, db: AsyncSession, tz: tzinfo = timezone.utc):
        self.db = db
        self.tz = tz
        self.sales = SqlEntityAccessor(db, Sale)
        self.products = SqlEntityAccessor(db, Product)
        self.users = SqlEntityAccessor(db, User, hidden_fields=HIDDEN_USER_FIELDS)

    async def list_sales(self, query: ListingQuery) -> PageResult:
        return await list_page(self.sales, query, SALE, tz=self.tz)

    async def list_user_sales(self, user_id: UUID, query: ListingQuery) -> PageResult:
        if query.search and query.search.partition(":")[0].strip() == "user":
            query = ListingQuery(
                page_number=query.page_number,
                page_size=query.page_size,
                sort=query.sort,
            )
        scope = (FieldFilter("user_id", MatchOperator.EQUALS, user_id),)
        return await list_page(self.sales, query, SALE, scope=scope, tz=self.tz)

    async def get_sale(self, sale_id: UUID) -> dict:
        return project(await self._get_or_404(self.sales, "Sale", sale_id), SALE)

    async def create_sale(
        self, product_id: UUID, user_id: UUID, quantity: int, address: str,
    ) -> dict:
        product = await self._get_or_404(self.products, "Product", product_id)
        user = await self._get_or_404(self.users, "User", user_id)
        reserved = await self.products.decrement_if_available(
            product.id, "stock", quantity,
        )
        # The identity map may hold a stale stock; reload it from the row
        await self.db.refresh(product, attribute_names=["stock"])
        if not reserved:
            raise InsufficientStockError(product.stock)

        sale_id = await self.sales.insert({
            "product": product,
            "user": user,
            "quantity": quantity,
            "address": address,
            "date": datetime.now(timezone.utc),
            "delivery_status": DeliveryStatus.PLACED.value,
        })
        await self.db.commit()
        logger.info(
            f"Sale {sale_id} created ({quantity} x product {product.id})",
            extra={"entity": "Sale", "entity_id": str(sale_id)},
        )
        return await self.get_sale(sale_id)

    async def update_sale(
        self,
        sale_id: UUID,
        product_id: UUID,
        user_id: UUID,
        quantity: int,
        address: str,
    ) -> SaleId:
        await self._get_or_404(self.sales, "Sale", sale_id)
        product = await self._get_or_404(self.products, "Product", product_id)
        user = await self._get_or_404(self.users, "User", user_id)
        await self.sales.update_by_id(sale_id, {
            "product": product,
            "user": user,
            "quantity": quantity,
            "address": address,
        })
        await self.db.commit()
        return SaleId(sale_id)

    async def delete_sale(self, sale_id: UUID) -> SaleId:
        if not await self.sales.delete_by_id(sale_id):
            raise ResourceNotFoundError("Sale", str(sale_id))
        await self.db.commit()
        logger.info(
            f"Sale {sale_id} deleted",
            extra={"entity": "Sale", "entity_id": str(sale_id)},
        )
        return SaleId(sale_id)

    async def update_delivery_status(self, sale_id: UUID, delivery_status: str) -> SaleId:
        try:
            status = DeliveryStatus(delivery_status)
        except ValueError:
            allowed = ", ".join(s.value for s in DeliveryStatus)
            raise ValidationFailedError(
                f"Incorrect delivery status. Delivery status should be one of: {allowed}",
                field_name="delivery_status",
            )
        if not await self.sales.update_by_id(sale_id, {"delivery_status": status.value}):
            raise ResourceNotFoundError("Sale", str(sale_id))
        await self.db.commit()
        return SaleId(sale_id)

    @staticmethod
    async def _get_or_404(accessor: SqlEntityAccessor, entity: str, record_id: UUID):
        record = await accessor.find_by_id(record_id)
        if record is None:
            raise ResourceNotFoundError(entity, str(record_id))
        return record

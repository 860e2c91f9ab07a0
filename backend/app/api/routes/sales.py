"""Sale Routes — orders, delivery status and per-user sale history."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, listing_query
from app.config import Settings, get_settings
from app.core.pager import ListingQuery
from app.infrastructure.database import get_db
from app.schemas.listing import IdResponse, PageResponse
from app.schemas.sale import DeliveryStatusUpdate, SaleResponse, SaleWrite
from app.services.sales import SalesService

router = APIRouter(
    prefix="/api/v1/sales",
    tags=["sales"],
    dependencies=[Depends(get_current_user)],
)


def get_sales_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SalesService:
    return SalesService(db, tz=settings.tz)


@router.get("", response_model=PageResponse[SaleResponse])
async def list_sales(
    query: ListingQuery = Depends(listing_query),
    service: SalesService = Depends(get_sales_service),
):
    """List sales. `search=date:2024-01-15` matches the whole local day."""
    return (await service.list_sales(query)).to_dict()


@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
async def create_sale(
    body: SaleWrite, service: SalesService = Depends(get_sales_service),
):
    return await service.create_sale(
        body.product, body.user, body.quantity, body.address,
    )


@router.get("/users/{user_id}", response_model=PageResponse[SaleResponse])
async def list_user_sales(
    user_id: UUID,
    query: ListingQuery = Depends(listing_query),
    service: SalesService = Depends(get_sales_service),
):
    return (await service.list_user_sales(user_id, query)).to_dict()


@router.get("/{sale_id}", response_model=SaleResponse)
async def get_sale(
    sale_id: UUID, service: SalesService = Depends(get_sales_service),
):
    return await service.get_sale(sale_id)


@router.put("/{sale_id}", response_model=IdResponse)
async def update_sale(
    sale_id: UUID,
    body: SaleWrite,
    service: SalesService = Depends(get_sales_service),
):
    updated = await service.update_sale(
        sale_id, body.product, body.user, body.quantity, body.address,
    )
    return {"id": str(updated)}


@router.delete("/{sale_id}", response_model=IdResponse)
async def delete_sale(
    sale_id: UUID, service: SalesService = Depends(get_sales_service),
):
    return {"id": str(await service.delete_sale(sale_id))}


@router.put("/{sale_id}/delivery_status", response_model=IdResponse)
async def update_delivery_status(
    sale_id: UUID,
    body: DeliveryStatusUpdate,
    service: SalesService = Depends(get_sales_service),
):
    updated = await service.update_delivery_status(sale_id, body.delivery_status)
    return {"id": str(updated)}

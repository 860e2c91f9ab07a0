"""User Routes — account CRUD, password change and paginated listing."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, listing_query
from app.core.pager import ListingQuery
from app.infrastructure.database import get_db
from app.schemas.listing import IdResponse, PageResponse
from app.schemas.user import PasswordChange, UserCreate, UserResponse, UserUpdate
from app.services.users import UserService

router = APIRouter(
    prefix="/api/v1/users",
    tags=["users"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=PageResponse[UserResponse])
async def list_users(
    query: ListingQuery = Depends(listing_query),
    db: AsyncSession = Depends(get_db),
):
    return (await UserService(db).list_users(query)).to_dict()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(body: UserCreate, db: AsyncSession = Depends(get_db)):
    return await UserService(db).create_user(body.name, body.email, body.password)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, db: AsyncSession = Depends(get_db)):
    return await UserService(db).get_user(user_id)


@router.put("/{user_id}", response_model=IdResponse)
async def update_user(
    user_id: UUID, body: UserUpdate, db: AsyncSession = Depends(get_db),
):
    updated = await UserService(db).update_user(user_id, body.name, body.email)
    return {"id": str(updated)}


@router.delete("/{user_id}", response_model=IdResponse)
async def delete_user(user_id: UUID, db: AsyncSession = Depends(get_db)):
    return {"id": str(await UserService(db).delete_user(user_id))}


@router.post("/{user_id}/change-password", response_model=IdResponse)
async def change_password(
    user_id: UUID, body: PasswordChange, db: AsyncSession = Depends(get_db),
):
    updated = await UserService(db).change_password(
        user_id, body.password_old, body.password_new,
    )
    return {"id": str(updated)}

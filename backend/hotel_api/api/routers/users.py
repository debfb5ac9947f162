from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_api.api.dependencies import get_current_user, require_role
from hotel_api.db.session import get_db
from hotel_api.db import crud_users
from hotel_api.schemas.user import UserBase

router = APIRouter()


@router.get("/me")
async def me(current_user=Depends(get_current_user)):
    return UserBase.model_validate(current_user)


@router.get("")
async def all_users(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_role("admin")),
):
    users = await crud_users.list_users(db)
    return {"data": [UserBase.model_validate(u) for u in users]}

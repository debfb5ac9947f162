from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_api.api.dependencies import require_role
from hotel_api.db.session import get_db
from hotel_api.db import crud_contacts
from hotel_api.schemas.contact import ContactCreate, ContactOut

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_contact(body: ContactCreate, db: AsyncSession = Depends(get_db)):
    await crud_contacts.create_contact(
        db,
        email=body.email,
        full_name=body.full_name,
        message=body.message,
        number=body.number or "",
    )
    return {"message": "Contact message received successfully"}


@router.get("")
async def list_contacts(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_role("admin")),
):
    contacts = await crud_contacts.list_contacts(db)
    return {"items": [ContactOut.model_validate(c) for c in contacts]}

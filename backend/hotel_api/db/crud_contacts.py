# hotel_api/db/crud_contacts.py
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_api.db.models import Contact


async def create_contact(
    db: AsyncSession,
    *,
    email: str,
    full_name: str,
    message: str,
    number: str = "",
) -> Contact:
    contact = Contact(email=email, full_name=full_name, message=message, number=number)
    db.add(contact)
    await db.commit()
    await db.refresh(contact)
    return contact


async def list_contacts(db: AsyncSession) -> List[Contact]:
    res = await db.execute(select(Contact).order_by(Contact.id.desc()))
    return list(res.scalars().all())

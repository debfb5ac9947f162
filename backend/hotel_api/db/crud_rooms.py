# hotel_api/db/crud_rooms.py
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_api.db.models import Room


async def get_room(db: AsyncSession, room_id: int) -> Room | None:
    res = await db.execute(select(Room).where(Room.id == room_id))
    return res.scalars().first()


async def list_rooms(db: AsyncSession) -> List[Room]:
    res = await db.execute(select(Room).order_by(Room.id.asc()))
    return list(res.scalars().all())


async def create_room(db: AsyncSession, **kwargs) -> Room:
    room = Room(**kwargs)
    db.add(room)
    await db.commit()
    await db.refresh(room)
    return room


async def update_room(db: AsyncSession, room: Room, data: dict) -> Room:
    """
    Partial update: keys whose value is None are left untouched.
    """
    for k, v in data.items():
        if v is not None:
            setattr(room, k, v)
    db.add(room)
    await db.commit()
    await db.refresh(room)
    return room


async def delete_room(db: AsyncSession, room: Room):
    await db.delete(room)
    await db.commit()
    return True

# hotel_api/db/crud_bookings.py

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hotel_api.db.models import Booking, BookingStatus, PaymentStatus


async def create_booking(
    db: AsyncSession,
    *,
    user_id: Optional[int],
    room_id: int,
    check_in: datetime,
    check_out: datetime,
    max_number_of_adults: int,
    user_email: str,
    first_name: str,
    last_name: Optional[str],
    message: Optional[str],
    payment_status: PaymentStatus,
    total_price: Decimal,
) -> Booking:
    booking = Booking(
        user_id=user_id,
        room_id=room_id,
        check_in=check_in,
        check_out=check_out,
        max_number_of_adults=max_number_of_adults,
        user_email=user_email,
        first_name=first_name,
        last_name=last_name,
        message=message,
        payment_status=payment_status,
        total_price=total_price,
        status=BookingStatus.PENDING,
    )
    db.add(booking)
    await db.commit()
    await db.refresh(booking)
    return booking


async def get_booking(db: AsyncSession, booking_id: str) -> Optional[Booking]:
    res = await db.execute(select(Booking).where(Booking.id == booking_id))
    return res.scalar_one_or_none()


async def count_bookings_for_room(db: AsyncSession, room_id: int) -> int:
    res = await db.execute(select(func.count(Booking.id)).where(Booking.room_id == room_id))
    return int(res.scalar_one())


def _with_relations(stmt):
    # eager-load so schema validation never triggers an async lazy load
    return stmt.options(selectinload(Booking.room), selectinload(Booking.user)).order_by(
        Booking.created_at.desc()
    )


async def list_bookings(db: AsyncSession) -> List[Booking]:
    """
    Admin view: every booking, newest first, room and user inline.
    """
    res = await db.execute(_with_relations(select(Booking)))
    return list(res.scalars().all())


async def list_bookings_for_user(db: AsyncSession, user_id: int) -> List[Booking]:
    stmt = _with_relations(select(Booking).where(Booking.user_id == user_id))
    res = await db.execute(stmt)
    return list(res.scalars().all())

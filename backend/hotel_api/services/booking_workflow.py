# hotel_api/services/booking_workflow.py
"""
Booking creation.

Order matters: validate, look up the room (and account), price the stay,
store the booking, and only then render the receipt and email it. Nothing
after the insert can undo it; receipt and mail problems are logged and the
booking is still returned.

There is no overlap check: two requests for the same room and dates both
succeed, and resubmitting a request creates a second booking.
"""
import asyncio
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from hotel_api.core.config import settings
from hotel_api.db import crud_bookings, crud_rooms, crud_users
from hotel_api.db.models import Booking, Room, User
from hotel_api.schemas.booking import BookingCreate
from hotel_api.services.booking_fields import Fields, build_booking_fields, resolve_display_name
from hotel_api.services.mailer import Attachment, Mailer
from hotel_api.services.notifications import Audience, compose, subject_for
from hotel_api.services.pricing import calculate_nights, calculate_total_price
from hotel_api.services.receipt import render_receipt

logger = logging.getLogger("uvicorn.error")


class BookingError(Exception):
    status_code = 400


class BookingValidationError(BookingError):
    status_code = 400


class RoomNotFoundError(BookingError):
    status_code = 404


async def _resolve_account(
    db: AsyncSession, user_id: Optional[int], current_user: Optional[User]
) -> Optional[User]:
    if user_id is None:
        return current_user
    if current_user is not None and current_user.id == user_id:
        return current_user
    return await crud_users.get_user(db, user_id)


async def create_booking(
    db: AsyncSession,
    payload: BookingCreate,
    mailer: Mailer,
    current_user: Optional[User] = None,
) -> Booking:
    if payload.check_out <= payload.check_in:
        raise BookingValidationError("Check-out date must be after check-in date")

    room = await crud_rooms.get_room(db, payload.room_id)
    if room is None:
        raise RoomNotFoundError("Room not found")

    # unknown account ids fall back to the supplied name and an unlinked booking
    account = await _resolve_account(db, payload.user_id, current_user)
    display_name = resolve_display_name(account, payload.first_name)

    nights = calculate_nights(payload.check_in, payload.check_out)
    if nights < 1:
        raise BookingValidationError("Stay must be at least one night")
    total_price = calculate_total_price(nights, room.price_per_night)

    booking = await crud_bookings.create_booking(
        db,
        user_id=account.id if account is not None else None,
        room_id=room.id,
        check_in=payload.check_in,
        check_out=payload.check_out,
        max_number_of_adults=payload.max_number_of_adults,
        user_email=payload.user_email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        message=payload.message,
        payment_status=payload.payment_status,
        total_price=total_price,
    )
    logger.info(
        "booking %s stored: room=%s nights=%s total=%s", booking.id, room.id, nights, total_price
    )

    await notify_booking(booking, room, display_name, mailer)
    return booking


async def _send_one(
    mailer: Mailer,
    to: str,
    audience: Audience,
    recipient_name: str,
    fields: Fields,
    attachments: list,
) -> bool:
    try:
        await mailer.send(
            to=to,
            subject=subject_for(audience),
            html=compose(audience, recipient_name, fields),
            attachments=attachments,
        )
    except Exception:
        logger.exception("failed to send %s notification to %s", audience.value, to)
        return False
    return True


async def notify_booking(booking: Booking, room: Room, display_name: str, mailer: Mailer) -> None:
    """
    Best-effort receipt + guest/admin emails for an already stored booking.
    Never raises; bounded by MAIL_TIMEOUT_SECONDS.
    """
    fields = build_booking_fields(booking, room)

    attachments = []
    try:
        # CPU-bound, keep it off the event loop
        pdf = await run_in_threadpool(render_receipt, booking, fields)
        attachments.append(Attachment(filename=f"receipt-{booking.id}.pdf", content=pdf))
    except Exception:
        logger.exception("receipt rendering failed for booking %s", booking.id)

    sends = [
        _send_one(mailer, booking.user_email, Audience.GUEST, display_name, fields, attachments)
    ]
    if settings.ADMIN_EMAIL:
        sends.append(
            _send_one(mailer, settings.ADMIN_EMAIL, Audience.ADMIN, "Admin", fields, attachments)
        )
    else:
        logger.warning("ADMIN_EMAIL not configured, admin notification skipped for %s", booking.id)

    try:
        await asyncio.wait_for(asyncio.gather(*sends), timeout=settings.MAIL_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.warning(
            "notifications for booking %s timed out after %ss",
            booking.id,
            settings.MAIL_TIMEOUT_SECONDS,
        )

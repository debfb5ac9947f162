import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_api.api.dependencies import get_current_user, get_optional_user, require_role
from hotel_api.db.session import get_db
from hotel_api.db import crud_bookings
from hotel_api.schemas.booking import BookingCreate, BookingDetail, BookingOut
from hotel_api.services import booking_workflow
from hotel_api.services.mailer import Mailer, get_mailer

logger = logging.getLogger("uvicorn.error")
router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_booking(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    current_user=Depends(get_optional_user),
):
    """
    Public: guests may book without an account. A valid bearer token links
    the booking to the caller.
    """
    try:
        booking = await booking_workflow.create_booking(
            db, body, mailer, current_user=current_user
        )
    except booking_workflow.BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except SQLAlchemyError:
        logger.exception("booking persistence failed")
        await db.rollback()
        raise HTTPException(status_code=500, detail="Server error")

    return {
        "message": "Booking created and confirmation emails sent",
        "booking": BookingOut.model_validate(booking),
    }


@router.get("")
async def list_bookings(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_role("admin")),
):
    bookings = await crud_bookings.list_bookings(db)
    return {"items": [BookingDetail.model_validate(b) for b in bookings]}


@router.get("/my-bookings")
async def my_bookings(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user),
):
    bookings = await crud_bookings.list_bookings_for_user(db, current_user.id)
    return {"items": [BookingDetail.model_validate(b) for b in bookings]}

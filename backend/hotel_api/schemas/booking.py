# backend/hotel_api/schemas/booking.py
from datetime import date, datetime, time, timezone
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from hotel_api.db.models import BookingStatus, PaymentStatus
from hotel_api.schemas.room import RoomBase
from hotel_api.schemas.user import UserOut


class BookingCreate(BaseModel):
    """
    Guest-submitted booking request. A client-sent total price is not part of
    the schema and is dropped; the server always prices the stay itself.
    """

    room_id: int
    # "2024-03-01" or a full ISO timestamp such as "2024-03-01T14:00:00.000Z"
    check_in: datetime
    check_out: datetime
    max_number_of_adults: int = Field(ge=1)
    user_email: EmailStr
    first_name: str = Field(min_length=1)
    last_name: Optional[str] = None
    message: Optional[str] = None
    payment_status: PaymentStatus
    user_id: Optional[int] = None

    model_config = {"str_strip_whitespace": True}

    @field_validator("check_in", "check_out", mode="before")
    @classmethod
    def _parse_stay_bound(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if len(v) == 10:
                return datetime.combine(date.fromisoformat(v), time.min)
            if v.endswith(("Z", "z")):
                v = v[:-1] + "+00:00"
            return datetime.fromisoformat(v)
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime.combine(v, time.min)
        return v

    @field_validator("check_in", "check_out")
    @classmethod
    def _to_naive_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @field_validator("user_email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return v.lower()


class BookingOut(BaseModel):
    id: str
    user_id: Optional[int] = None
    room_id: int
    check_in: datetime
    check_out: datetime
    max_number_of_adults: int
    user_email: str
    first_name: str
    last_name: Optional[str] = None
    message: Optional[str] = None
    payment_status: PaymentStatus
    total_price: float
    status: BookingStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BookingDetail(BookingOut):
    # only build from rows loaded with selectinload(room, user)
    room: Optional[RoomBase] = None
    user: Optional[UserOut] = None

# hotel_api/db/models.py

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Text,
    ForeignKey,
    Numeric,
    Boolean,
    JSON,
    Enum,
)
from sqlalchemy.orm import relationship

from hotel_api.db.base import Base


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    PAY_AT_HOTEL = "pay-at-hotel"
    PAID = "paid"


def _string_enum(enum_cls):
    # stored as a constrained VARCHAR holding the enum *value*
    return Enum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


def _new_booking_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, default="")
    email = Column(String(255), unique=True, index=True, nullable=False)

    # DB column name: password_hash
    # Python attribute: hashed_password
    hashed_password = Column("password_hash", String(255), nullable=False)

    # "user" | "admin"
    role = Column(String(20), nullable=False, default="user")

    # sha256 of the emailed token, never the raw token
    reset_password_token = Column(String(64), nullable=True, index=True)
    reset_password_expires = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    bookings = relationship("Booking", back_populates="user")


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    price_per_night = Column(Numeric(10, 2), nullable=False)

    # list[str] as JSON in DB
    images = Column(JSON, nullable=False, default=list)
    features = Column(JSON, nullable=False, default=list)

    description = Column(Text, nullable=False)
    max_number_of_adults = Column(Integer, nullable=False, default=1)
    room_number = Column(String(20), nullable=False, default="")
    is_available = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    # bookings outlive the catalog entry; the FK refuses the delete instead
    bookings = relationship(
        "Booking",
        back_populates="room",
        passive_deletes="all",
    )


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=_new_booking_id)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    room_id = Column(
        Integer,
        ForeignKey("rooms.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # naive UTC
    check_in = Column(DateTime, nullable=False)
    check_out = Column(DateTime, nullable=False)
    max_number_of_adults = Column(Integer, nullable=False)

    user_email = Column(String(255), nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    message = Column(Text, nullable=True)

    payment_status = Column(_string_enum(PaymentStatus), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    status = Column(
        _string_enum(BookingStatus), nullable=False, default=BookingStatus.PENDING
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    user = relationship("User", back_populates="bookings")
    room = relationship("Room", back_populates="bookings")


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    number = Column(String(32), nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

# hotel_api/services/booking_fields.py
from typing import List, Optional, Tuple

from hotel_api.db.models import Booking, Room, User
from hotel_api.services.pricing import format_price

Fields = List[Tuple[str, str]]

_PAYMENT_LABELS = {
    "pay-at-hotel": "Pay at hotel",
    "paid": "Paid",
}


def _display_date(value) -> str:
    # e.g. "Fri Mar 01 2024"
    return value.strftime("%a %b %d %Y")


def _enum_value(value) -> str:
    return getattr(value, "value", value)


def resolve_display_name(account: Optional[User], supplied_name: str) -> str:
    """
    Name used to greet the guest: the linked account's stored first name if it
    has one, otherwise whatever the client sent.
    """
    if account is not None and account.first_name and account.first_name.strip():
        return account.first_name.strip()
    return supplied_name


def build_booking_fields(booking: Booking, room: Room) -> Fields:
    """
    Ordered (label, value) rows shared by the PDF receipt and both emails.
    """
    client_name = " ".join(p for p in (booking.first_name, booking.last_name) if p)
    fields: Fields = [
        ("Client Name", client_name),
        ("Client Email", booking.user_email),
        ("Room Name", room.name),
        ("Check-In Date", _display_date(booking.check_in)),
        ("Check-Out Date", _display_date(booking.check_out)),
        ("Number of Adults", str(booking.max_number_of_adults)),
        ("Payment", _PAYMENT_LABELS.get(_enum_value(booking.payment_status), str(booking.payment_status))),
        ("Total Price", format_price(booking.total_price)),
        ("Status", _enum_value(booking.status)),
    ]
    if booking.message:
        fields.append(("Message", booking.message))
    return fields

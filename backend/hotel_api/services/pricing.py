# hotel_api/services/pricing.py
import math
from datetime import date
from decimal import Decimal
from typing import Union

ONE_DAY_SECONDS = 24 * 60 * 60


def calculate_nights(check_in: date, check_out: date) -> int:
    """
    Whole nights between two dates (or datetimes), rounded half-up to the
    nearest day. Never negative: callers reject check_out <= check_in first.
    """
    days = (check_out - check_in).total_seconds() / ONE_DAY_SECONDS
    nights = math.floor(days + 0.5)
    return nights if nights > 0 else 0


def calculate_total_price(nights: int, price_per_night: Union[Decimal, int, float]) -> Decimal:
    return Decimal(nights) * Decimal(str(price_per_night))


def format_price(amount: Union[Decimal, int, float]) -> str:
    # display only; never stored
    return f"${Decimal(str(amount)):,.2f}"

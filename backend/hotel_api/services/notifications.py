# hotel_api/services/notifications.py
import enum
import os
from typing import Sequence, Tuple

from jinja2 import Environment, FileSystemLoader, select_autoescape

from hotel_api.core.config import settings

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
TEMPLATE_DIR = os.path.join(BASE_DIR, "templates", "email")

env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


class Audience(str, enum.Enum):
    GUEST = "guest"
    ADMIN = "admin"


# heading, colours and wording per audience; the table itself is shared
_TONE = {
    Audience.GUEST: {
        "subject": "Booking Confirmation",
        "heading": "Booking Confirmation",
        "accent": "#4a90e2",
        "row_color": "#f0f8ff",
        "greeting": "Dear {name},",
        "intro": "Thank you for your booking. Here are your booking details:",
        "closing": ["We look forward to hosting you!"],
        "signed": True,
    },
    Audience.ADMIN: {
        "subject": "New Booking Alert",
        "heading": "HELLO ADMIN",
        "accent": "#e94e1b",
        "row_color": "#f8d7da",
        "greeting": "",
        "intro": "A new booking has been made with the following details:",
        "closing": ["A PDF receipt is attached for your records."],
        "signed": False,
    },
}


def subject_for(audience: Audience) -> str:
    return _TONE[audience]["subject"]


def compose(audience: Audience, recipient_name: str, fields: Sequence[Tuple[str, str]]) -> str:
    """
    Render the HTML body for one audience. Values are escaped by the template.
    """
    tone = _TONE[audience]
    template = env.get_template("booking.html")
    return template.render(
        heading=tone["heading"],
        accent=tone["accent"],
        row_color=tone["row_color"],
        greeting=tone["greeting"].format(name=recipient_name) if tone["greeting"] else "",
        intro=tone["intro"],
        fields=list(fields),
        closing=tone["closing"],
        signature=f"{settings.HOTEL_NAME} Team" if tone["signed"] else "",
    )


def compose_password_reset(reset_url: str) -> str:
    template = env.get_template("password_reset.html")
    return template.render(
        reset_url=reset_url,
        expires_minutes=settings.RESET_TOKEN_EXPIRE_MINUTES,
    )

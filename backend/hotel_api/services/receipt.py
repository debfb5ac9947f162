# hotel_api/services/receipt.py
"""
PDF booking receipt.

Fixed single-page A4 layout:

    hotel name
    "Booking Receipt"
    receipt number (= booking id)
    Field | Details table, one row per (label, value) pair, in order
    QR code placeholder box
    thank-you line

Rows that run past the bottom margin are not paginated; the field set is
small and fixed. Cell text too wide for its column is cut and ends in "...".
"""
import io
from typing import Sequence, Tuple

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from hotel_api.core.config import settings
from hotel_api.db.models import Booking

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 50
ROW_HEIGHT = 22
LABEL_COL_WIDTH = 170
VALUE_COL_WIDTH = PAGE_WIDTH - 2 * MARGIN - LABEL_COL_WIDTH
CELL_PADDING = 6
FONT_SIZE = 10
ELLIPSIS = "..."
QR_BOX_SIZE = 100

HEADER_FILL = colors.HexColor("#4a90e2")
ROW_FILL = colors.HexColor("#f0f8ff")


def fit_text(text: str, font_name: str, font_size: float, max_width: float) -> str:
    if stringWidth(text, font_name, font_size) <= max_width:
        return text
    keep = len(text)
    while keep > 0 and stringWidth(text[:keep] + ELLIPSIS, font_name, font_size) > max_width:
        keep -= 1
    return text[:keep].rstrip() + ELLIPSIS


def _draw_row(pdf: canvas.Canvas, y: float, label: str, value: str, *, header: bool = False, shaded: bool = False):
    if header or shaded:
        pdf.setFillColor(HEADER_FILL if header else ROW_FILL)
        pdf.rect(MARGIN, y, LABEL_COL_WIDTH + VALUE_COL_WIDTH, ROW_HEIGHT, stroke=0, fill=1)

    pdf.setStrokeColor(colors.lightgrey)
    pdf.rect(MARGIN, y, LABEL_COL_WIDTH, ROW_HEIGHT, stroke=1, fill=0)
    pdf.rect(MARGIN + LABEL_COL_WIDTH, y, VALUE_COL_WIDTH, ROW_HEIGHT, stroke=1, fill=0)

    font = "Helvetica-Bold" if header else "Helvetica"
    pdf.setFillColor(colors.white if header else colors.black)
    pdf.setFont(font, FONT_SIZE)
    text_y = y + (ROW_HEIGHT - FONT_SIZE) / 2 + 2
    value = " ".join(value.split())
    label = fit_text(label, font, FONT_SIZE, LABEL_COL_WIDTH - 2 * CELL_PADDING)
    value = fit_text(value, font, FONT_SIZE, VALUE_COL_WIDTH - 2 * CELL_PADDING)
    pdf.drawString(MARGIN + CELL_PADDING, text_y, label)
    pdf.drawString(MARGIN + LABEL_COL_WIDTH + CELL_PADDING, text_y, value)


def render_receipt(
    booking: Booking,
    fields: Sequence[Tuple[str, str]],
    hotel_name: str | None = None,
) -> bytes:
    """
    Render the receipt and return the PDF bytes.

    Output depends only on the arguments: the canvas runs in invariant mode so
    no creation timestamp or random document id is embedded.
    """
    hotel_name = hotel_name or settings.HOTEL_NAME
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4, invariant=1, pageCompression=0)
    pdf.setTitle(f"Booking Receipt {booking.id}")
    pdf.setAuthor(hotel_name)

    center_x = PAGE_WIDTH / 2
    y = PAGE_HEIGHT - MARGIN - 10

    # title block
    pdf.setFillColor(colors.black)
    pdf.setFont("Helvetica-Bold", 20)
    pdf.drawCentredString(center_x, y, hotel_name)
    y -= 26
    pdf.setFont("Helvetica", 14)
    pdf.drawCentredString(center_x, y, "Booking Receipt")
    y -= 18
    pdf.setFont("Helvetica", 9)
    pdf.setFillColor(colors.grey)
    pdf.drawCentredString(center_x, y, f"Receipt #: {booking.id}")
    y -= 30

    # table
    y -= ROW_HEIGHT
    _draw_row(pdf, y, "Field", "Details", header=True)
    for i, (label, value) in enumerate(fields):
        y -= ROW_HEIGHT
        _draw_row(pdf, y, str(label), str(value), shaded=(i % 2 == 0))

    # QR placeholder
    y -= 30 + QR_BOX_SIZE
    qr_x = center_x - QR_BOX_SIZE / 2
    pdf.setStrokeColor(colors.grey)
    pdf.setDash(3, 3)
    pdf.rect(qr_x, y, QR_BOX_SIZE, QR_BOX_SIZE, stroke=1, fill=0)
    pdf.setDash()
    pdf.setFillColor(colors.grey)
    pdf.setFont("Helvetica", 8)
    pdf.drawCentredString(center_x, y + QR_BOX_SIZE / 2 - 3, "QR code")

    # closing line
    y -= 40
    pdf.setFillColor(colors.black)
    pdf.setFont("Helvetica-Oblique", 11)
    pdf.drawCentredString(center_x, y, f"Thank you for choosing {hotel_name}!")

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()

"""
Table QR codes and printed tickets.

A QR code points customers at ``{base}/session/{id}``. The ticket is a
PDF sized for 80 mm thermal printers with the restaurant header, the
table name, the QR code and the session terms.
"""

from __future__ import annotations

import base64
import io
import os
from functools import lru_cache
from typing import Optional

import qrcode
from fastapi import Request
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas as pdf_canvas

from mooprompt_api.models import ExtraCharge, RestaurantInfo, TableSession
from shared.config.constants import ChargeType
from shared.config.logging import get_logger
from shared.config.settings import settings

logger = get_logger(__name__)

# 80 mm in points
TICKET_WIDTH = 226.77
TICKET_MARGIN = 15
QR_SIZE = 120


def public_base_url(request: Optional[Request]) -> str:
    """Configured public URL, else the scheme and host the request came in on."""
    if settings.public_base_url:
        return settings.public_base_url.rstrip("/")
    if request is None:
        return "http://localhost:3000"
    proto = request.headers.get("x-forwarded-proto") or request.url.scheme
    host = request.headers.get("host") or request.url.netloc
    return f"{proto}://{host}"


def session_url(base_url: str, session_id: int) -> str:
    return f"{base_url}/session/{session_id}"


def qr_png_bytes(data: str, box_size: int = 10, border: int = 5) -> bytes:
    qr = qrcode.QRCode(version=1, box_size=box_size, border=border)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def qr_data_url(data: str) -> str:
    """PNG QR code as a ``data:`` URL the browser can show directly."""
    encoded = base64.b64encode(qr_png_bytes(data)).decode("ascii")
    return f"data:image/png;base64,{encoded}"


@lru_cache
def _ticket_fonts() -> tuple[str, str]:
    """(body, bold) font names; a configured TTF covers both."""
    path = settings.ticket_font_path
    if path and os.path.isfile(path):
        try:
            pdfmetrics.registerFont(TTFont("TicketFont", path))
            return "TicketFont", "TicketFont"
        except (TTFError, OSError) as e:
            logger.warning("Could not load ticket font", path=path, error=str(e))
    return "Helvetica", "Helvetica-Bold"


def _baht(amount: float) -> str:
    return f"{amount:,.2f} บาท"


def render_ticket_pdf(
    session: TableSession,
    restaurant: RestaurantInfo,
    charges: list[ExtraCharge],
    url: str,
) -> bytes:
    """
    Draw the table ticket.

    Lines are laid out top-down on a tall page, then the page is cut
    to the height actually used.
    """
    body_font, bold_font = _ticket_fonts()
    center = TICKET_WIDTH / 2
    right = TICKET_WIDTH - TICKET_MARGIN

    # (kind, payload) draw operations collected first so the page height is known
    ops: list[tuple[str, tuple]] = []
    y = 0.0

    def text(value: str, size: float = 8, bold: bool = False, align: str = "center") -> None:
        nonlocal y
        y += size + 4
        ops.append(("text", (value, size, bold, align, y)))

    def pair(label: str, value: str) -> None:
        nonlocal y
        y += 12
        ops.append(("pair", (label, value, y)))

    def rule() -> None:
        nonlocal y
        y += 8
        ops.append(("rule", (y,)))
        y += 4

    y += TICKET_MARGIN
    text(restaurant.name, size=14, bold=True)
    if restaurant.address:
        text(restaurant.address)
    if restaurant.phone:
        text(f"โทร: {restaurant.phone}")
    if restaurant.open_time or restaurant.close_time:
        text(f"เปิดบริการ: {restaurant.open_time or '-'} - {restaurant.close_time or '-'}")
    if restaurant.wifi_name:
        text(f"WiFi: {restaurant.wifi_name}")
    if restaurant.wifi_password:
        text(f"รหัสผ่าน: {restaurant.wifi_password}")
    rule()

    text(session.table.name, size=12, bold=True)
    y += 6
    ops.append(("qr", (y,)))
    y += QR_SIZE
    text("สแกน QR Code เพื่อเข้าสู่ระบบสั่งอาหาร")
    text(url, size=6)
    rule()

    if charges:
        text("ค่าบริการเพิ่มเติม:", bold=True, align="left")
        for charge in charges:
            per_person = charge.charge_type == ChargeType.PER_PERSON
            amount = charge.price * session.people_count if per_person else charge.price
            label = f"• {charge.name}"
            if per_person:
                label += f" ({charge.price:,.2f}/คน)"
            pair(label, _baht(amount))
        y += 4

    pair("จำนวนคน:", f"{session.people_count} คน")
    if session.package is not None:
        pair("แพ็กเกจ:", session.package.name)
        pair("ราคา/คน:", _baht(session.package.price_per_person))
        if session.package.duration_minutes:
            pair("ระยะเวลา:", f"{session.package.duration_minutes} นาที")
    pair("เวลาเริ่ม:", session.start_time.strftime("%H:%M"))
    rule()
    text("ขอบคุณที่ใช้บริการ")
    y += TICKET_MARGIN

    height = y
    buffer = io.BytesIO()
    c = pdf_canvas.Canvas(buffer, pagesize=(TICKET_WIDTH, height))
    c.setTitle(f"Table {session.table.name}")
    qr_image = ImageReader(io.BytesIO(qr_png_bytes(url, box_size=8, border=1)))

    for kind, payload in ops:
        if kind == "text":
            value, size, bold, align, top = payload
            c.setFont(bold_font if bold else body_font, size)
            if align == "left":
                c.drawString(TICKET_MARGIN, height - top, value)
            else:
                c.drawCentredString(center, height - top, value)
        elif kind == "pair":
            label, value, top = payload
            c.setFont(body_font, 8)
            c.drawString(TICKET_MARGIN, height - top, label)
            c.drawRightString(right, height - top, value)
        elif kind == "rule":
            (top,) = payload
            c.line(TICKET_MARGIN, height - top, right, height - top)
        elif kind == "qr":
            (top,) = payload
            c.drawImage(
                qr_image,
                (TICKET_WIDTH - QR_SIZE) / 2,
                height - top - QR_SIZE,
                width=QR_SIZE,
                height=QR_SIZE,
            )

    c.showPage()
    c.save()
    return buffer.getvalue()

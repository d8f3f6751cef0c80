"""
PDF documents for orders: invoice / proforma and delivery note.

Orders still numbered ``DEV-...`` get a PROFORMA; paid orders an INVOICE.
Amounts can be shown in a display currency; the QR code carries the
order reference and its tracking URL.
"""

from io import BytesIO
from typing import List, Optional

import qrcode
from django.conf import settings
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from apps.currency.services import convert, format_amount, get_rates

TABLE_STYLE = TableStyle([
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#111827")),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("FONTSIZE", (0, 0), (-1, 0), 9),
    ("FONTSIZE", (0, 1), (-1, -1), 8),
    ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
    ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.whitesmoke, colors.white]),
])


def document_type(order) -> str:
    return 'PROFORMA' if order.is_quote_number else 'INVOICE'


def tracking_url(order) -> str:
    return f"{settings.SITE_URL.rstrip('/')}/track?order={order.order_number}"


def _qr_image(data: str, size_mm: int = 28) -> Image:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    buf = BytesIO()
    qr.make_image(fill_color="black", back_color="white").save(buf, format="PNG")
    buf.seek(0)
    return Image(buf, width=size_mm * mm, height=size_mm * mm)


def _header(order, title: str, styles) -> List:
    company = [f"<b>{settings.COMPANY_NAME}</b>"] + list(settings.COMPANY_ADDRESS_LINES)
    customer = [f"<b>{order.user.full_name or order.user.get_display_name()}</b>"]
    if order.user.email:
        customer.append(order.user.email)
    if order.user.phone:
        customer.append(order.user.phone)
    if order.billing_address:
        customer.extend(order.billing_address.as_lines())

    heading = Table(
        [[
            Paragraph("<br/>".join(company), styles["Normal"]),
            _qr_image(f"{order.order_number}\n{tracking_url(order)}"),
        ]],
        colWidths=[140 * mm, 40 * mm],
    )
    return [
        heading,
        Spacer(1, 6),
        Paragraph(f"<b>{title} {order.order_number}</b>", styles["Title"]),
        Paragraph(f"Date: {order.created_at:%d/%m/%Y}", styles["Normal"]),
        Spacer(1, 6),
        Paragraph("<br/>".join(customer), styles["Normal"]),
        Spacer(1, 10),
    ]


def _build(story: List, title: str) -> bytes:
    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=12 * mm,
        rightMargin=12 * mm,
        topMargin=12 * mm,
        bottomMargin=12 * mm,
        title=title,
    )
    doc.build(story)
    return buf.getvalue()


def build_invoice_pdf(order, display_currency: Optional[str] = None) -> bytes:
    """
    Invoice (or proforma) for an order.

    Raises:
        ExchangeRateMissingError: ``display_currency`` has no rate
    """
    currency = (display_currency or order.currency).upper()
    rates = get_rates()

    def money(amount):
        return format_amount(convert(amount, order.currency, currency, rates), currency)

    styles = getSampleStyleSheet()
    title = document_type(order)
    story = _header(order, title, styles)

    rows = [["Item", "Qty", "Unit price", "Total"]]
    for item in order.items.all():
        rows.append([item.name, str(item.quantity), money(item.unit_price), money(item.total_price)])
    rows.append(["", "", "Total", money(order.total)])
    paid = order.amount_paid
    if paid:
        rows.append(["", "", "Paid", money(paid)])
        rows.append(["", "", "Balance due", money(order.balance_due)])

    table = Table(rows, colWidths=[95 * mm, 15 * mm, 35 * mm, 35 * mm], repeatRows=1)
    table.setStyle(TABLE_STYLE)
    story.append(table)

    if currency != order.currency:
        story.append(Spacer(1, 6))
        story.append(Paragraph(
            f"Amounts converted from {order.currency} at the current exchange rate.",
            styles["Italic"],
        ))
    if title == 'PROFORMA':
        story.append(Spacer(1, 6))
        story.append(Paragraph("This proforma is not a receipt of payment.", styles["Normal"]))
    return _build(story, f"{title} {order.order_number}")


def build_delivery_note_pdf(order) -> bytes:
    """Delivery note listing items and quantities, without prices."""
    styles = getSampleStyleSheet()
    story = _header(order, "DELIVERY NOTE", styles)

    if order.shipping_address:
        story.append(Paragraph(
            "<b>Ship to:</b><br/>" + "<br/>".join(order.shipping_address.as_lines()),
            styles["Normal"],
        ))
        story.append(Spacer(1, 8))

    rows = [["Item", "Qty"]]
    for item in order.items.all():
        rows.append([item.name, str(item.quantity)])
    table = Table(rows, colWidths=[150 * mm, 30 * mm], repeatRows=1)
    table.setStyle(TABLE_STYLE)
    story.append(table)
    story.append(Spacer(1, 24))
    story.append(Paragraph("Received by: ____________________    Date: ___________", styles["Normal"]))
    return _build(story, f"Delivery note {order.order_number}")

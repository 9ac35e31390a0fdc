# app/services/receipt_service.py
"""
Generowanie paragonu PDF dla oplaconej faktury.
"""

import io
from xml.sax.saxutils import escape
from decimal import Decimal

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from app.data.models.invoice import InvoiceModel
from app.data.models.user import UserModel
from app.utils.settings import SHOP_NAME
from app.utils.logging import get_logger

logger = get_logger(__name__)


def _money(value) -> str:
    return f"{Decimal(value):.2f}"


class ReceiptService:
    """Buduje PDF z paragonem: naglowek, dane kupujacego, tabela pozycji, suma."""

    def __init__(self, shop_name: str | None = None):
        self.shop_name = shop_name or SHOP_NAME
        self.styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            "ReceiptTitle",
            parent=self.styles["Heading1"],
            fontSize=18,
            spaceAfter=12,
            alignment=TA_CENTER,
            textColor=colors.darkblue,
        )

    def render(self, invoice: InvoiceModel, buyer: UserModel) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=0.75 * inch,
            rightMargin=0.75 * inch,
            topMargin=0.75 * inch,
            bottomMargin=0.75 * inch,
            title=f"Receipt {invoice.id}",
        )

        story = [
            Paragraph(escape(self.shop_name.upper()), self.title_style),
            Paragraph(f"Receipt for invoice #{invoice.id}", self.styles["Heading2"]),
            Paragraph(f"Date: {invoice.created_at.strftime('%Y-%m-%d %H:%M:%S')}", self.styles["Normal"]),
            Paragraph(f"Buyer: {escape(buyer.name)} ({escape(buyer.email)}), ID {buyer.id}", self.styles["Normal"]),
            Paragraph(f"Status: {invoice.status}", self.styles["Normal"]),
            Spacer(1, 0.3 * inch),
        ]

        rows = [["Product", "Quantity", "Unit price", "Line total"]]
        for item in invoice.items:
            name = item.product.name if item.product else f"#{item.product_id}"
            rows.append([
                f"{name} (ID {item.product_id})",
                str(item.quantity),
                _money(item.price),
                _money(Decimal(item.price) * item.quantity),
            ])
        rows.append(["", "", "TOTAL", _money(invoice.total)])

        table = Table(rows, colWidths=[3.0 * inch, 1.0 * inch, 1.2 * inch, 1.3 * inch])
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.darkblue),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
            ("GRID", (0, 0), (-1, -2), 0.5, colors.grey),
            ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
            ("LINEABOVE", (2, -1), (-1, -1), 1, colors.black),
        ]))
        story.append(table)

        doc.build(story)
        logger.info(f"Wygenerowano paragon dla faktury {invoice.id}")
        return buffer.getvalue()

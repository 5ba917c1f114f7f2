import io
import logging

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from marketplace.utils.helpers import to_csv, utcnow

logger = logging.getLogger(__name__)

BRAND_COLOR = colors.HexColor("#1a237e")

WALLET_HEADERS = [
    "Date", "Type", "Amount", "Reason", "Status", "Transaction ID", "User Name", "User Email",
]
ORDER_HEADERS = [
    "Order ID", "Date", "Client", "Vendor", "Product", "Quantity",
    "Unit Price", "Total", "Payment Method", "Status",
]
PRODUCT_HEADERS = [
    "Product ID", "Name", "Vendor", "Category", "Subcategory", "Price", "Stock", "Active", "Created",
]
VENDOR_HEADERS = [
    "Vendor ID", "Name", "Type", "Approved", "Status", "Owner", "Owner Phone",
    "Subscription", "Wallet Balance", "Created",
]


def get_custom_styles():
    """Paragraph styles shared by every PDF report"""
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        name="ReportTitle",
        parent=styles["Heading1"],
        fontSize=20,
        textColor=BRAND_COLOR,
        spaceAfter=12,
        alignment=TA_CENTER,
    ))
    styles.add(ParagraphStyle(
        name="ReportSubtitle",
        parent=styles["Normal"],
        fontSize=10,
        textColor=colors.grey,
        alignment=TA_CENTER,
        spaceAfter=16,
    ))
    return styles


def get_table_style():
    return TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), BRAND_COLOR),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 9),
        ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 1), (-1, -1), 8),
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f5f5f5")]),
    ])


class ReportService:
    """CSV and PDF renderings of ledger and catalogue data"""

    @staticmethod
    def wallet_rows(wallet, transactions) -> list:
        user = wallet.user
        return [
            [
                t.created_at.isoformat() if t.created_at else "",
                t.type.value,
                float(t.amount),
                t.reason or "",
                t.status.value,
                t.transaction_id,
                (user.name or "") if user else "",
                (user.email or "") if user else "",
            ]
            for t in transactions
        ]

    @staticmethod
    def order_rows(orders) -> list:
        rows = []
        for order in orders:
            client_user = order.client.user if order.client else None
            rows.append([
                order.id,
                order.created_at.isoformat() if order.created_at else "",
                (client_user.name or client_user.phone_number) if client_user else "",
                order.vendor.name if order.vendor else "",
                order.product.name if order.product else "",
                order.quantity,
                float(order.unit_price),
                float(order.total_amount),
                order.payment_method.value,
                order.status.value,
            ])
        return rows

    @staticmethod
    def csv(headers: list, rows) -> str:
        return to_csv(headers, rows)

    @staticmethod
    def pdf(title: str, headers: list, rows, subtitle: str = None) -> bytes:
        """Render a titled table as a landscape A4 document"""
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer, pagesize=landscape(A4),
            topMargin=1 * cm, bottomMargin=1 * cm, leftMargin=1 * cm, rightMargin=1 * cm,
        )
        styles = get_custom_styles()
        cell = styles["BodyText"]
        cell.fontSize = 7
        cell.leading = 9

        elements = [
            Paragraph(title, styles["ReportTitle"]),
            Paragraph(
                subtitle or f"Generated on {utcnow().strftime('%d %B %Y %H:%M')} UTC",
                styles["ReportSubtitle"],
            ),
        ]

        if rows:
            data = [headers] + [[Paragraph(str(value), cell) for value in row] for row in rows]
            table = Table(data, repeatRows=1)
            table.setStyle(get_table_style())
            elements.append(table)
        else:
            elements.append(Spacer(1, 12))
            elements.append(Paragraph("No records found.", styles["Normal"]))

        doc.build(elements)
        logger.debug("Rendered PDF report %r with %d rows", title, len(rows))
        return buffer.getvalue()

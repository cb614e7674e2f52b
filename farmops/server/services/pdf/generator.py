"""
PDF rendering with reportlab platypus.

Every document shares a header with the farm details, a title block with the
document number, a customer block and an items table; the type-specific
sections are appended by the template functions below.
"""

from __future__ import annotations

from datetime import datetime
from io import BytesIO
from typing import Callable, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Flowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from farmops.core.models.domain import DocumentType

from .data import DocumentData, PartyInfo

TITLES = {
    DocumentType.PACKING_SLIP: "PACKING SLIP",
    DocumentType.INVOICE: "INVOICE",
    DocumentType.DELIVERY_RECEIPT: "DELIVERY RECEIPT",
    DocumentType.BILL_OF_LADING: "BILL OF LADING",
}

BOL_DISCLAIMER = (
    "Received the above described goods in apparent good order, except as noted. "
    "The carrier agrees to deliver to consignee at destination."
)
RECEIPT_CONFIRMATION = "By signing above, you confirm that you have received the items listed in good condition."

HEADER_BACKGROUND = colors.HexColor("#166534")
GRID_COLOR = colors.HexColor("#D1D5DB")
MUTED = colors.HexColor("#6B7280")

_styles = getSampleStyleSheet()
STYLE_FARM = ParagraphStyle("FarmName", parent=_styles["Heading1"], fontSize=18, spaceAfter=4)
STYLE_TITLE = ParagraphStyle("DocTitle", parent=_styles["Heading2"], alignment=TA_RIGHT, textColor=HEADER_BACKGROUND)
STYLE_RIGHT = ParagraphStyle("Right", parent=_styles["Normal"], alignment=TA_RIGHT)
STYLE_SECTION = ParagraphStyle("Section", parent=_styles["Heading4"], spaceBefore=10, spaceAfter=4)
STYLE_BODY = _styles["Normal"]
STYLE_SMALL = ParagraphStyle("Small", parent=_styles["Normal"], fontSize=8, textColor=MUTED)


def _para(text: str, style: ParagraphStyle) -> Paragraph:
    """Paragraph of plain text; markup characters in user data are escaped."""
    return Paragraph(escape(text), style)


def format_date(value: Optional[datetime]) -> str:
    return value.strftime("%b %d, %Y") if value else "-"


def format_money(cents: int) -> str:
    return f"${cents / 100:,.2f}"


def format_oz(value: float) -> str:
    return f"{value:g} oz"


def _party_lines(party: PartyInfo) -> list[str]:
    lines = list(party.address_lines)
    if party.phone:
        lines.append(party.phone)
    if party.email:
        lines.append(party.email)
    return lines


def _table(rows: list[list], col_widths: list[float], header: bool = True, align_right_from: Optional[int] = None):
    table = Table(rows, colWidths=col_widths, repeatRows=1 if header else 0)
    style = [
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("GRID", (0, 0), (-1, -1), 0.5, GRID_COLOR),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
    ]
    if header:
        style += [
            ("BACKGROUND", (0, 0), (-1, 0), HEADER_BACKGROUND),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ]
    if align_right_from is not None:
        style.append(("ALIGN", (align_right_from, 0), (-1, -1), "RIGHT"))
    table.setStyle(TableStyle(style))
    return table


def header_block(data: DocumentData) -> list[Flowable]:
    farm_cell = [_para(data.farm.name, STYLE_FARM)] + [
        _para(line, STYLE_BODY) for line in _party_lines(data.farm)
    ]
    title_cell = [
        _para(TITLES[data.type], STYLE_TITLE),
        _para(f"No. {data.document_number}", STYLE_RIGHT),
        _para(f"Date: {format_date(data.issued_at)}", STYLE_RIGHT),
        _para(f"Order: {data.order_number}", STYLE_RIGHT),
    ]
    table = Table([[farm_cell, title_cell]], colWidths=[4 * inch, 3 * inch])
    table.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
    return [table, Spacer(1, 0.2 * inch)]


def customer_block(data: DocumentData, heading: str = "Bill To") -> list[Flowable]:
    flowables: list[Flowable] = [_para(heading, STYLE_SECTION)]
    if data.customer is None:
        flowables.append(_para("No customer information", STYLE_BODY))
        return flowables
    flowables.append(_para(data.customer.display_name, STYLE_BODY))
    if data.customer.company_name and data.customer.name != data.customer.company_name:
        flowables.append(_para(f"Attn: {data.customer.name}", STYLE_BODY))
    flowables += [_para(line, STYLE_BODY) for line in _party_lines(data.customer)]
    return flowables


def items_table(data: DocumentData) -> list[Flowable]:
    rows = [["Product", "Quantity", "Harvest Date"]]
    for item in data.items:
        name = f"{item.product_name} ({item.sku_name})" if item.sku_name else item.product_name
        rows.append([name, format_oz(item.quantity_oz), format_date(item.harvest_date)])
    return [_para("Items", STYLE_SECTION), _table(rows, [3.5 * inch, 1.5 * inch, 2 * inch])]


def notes_block(data: DocumentData) -> list[Flowable]:
    if not data.notes:
        return []
    return [_para("Notes", STYLE_SECTION), _para(data.notes, STYLE_BODY)]


def signature_lines(labels: list[str]) -> list[Flowable]:
    rows = [["_" * 30 for _ in labels], labels, ["Date: ____________" for _ in labels]]
    table = Table(rows, colWidths=[7 * inch / len(labels)] * len(labels))
    table.setStyle(TableStyle([("FONTSIZE", (0, 0), (-1, -1), 9), ("TOPPADDING", (0, 0), (-1, 0), 24)]))
    return [Spacer(1, 0.2 * inch), table]


def packing_slip(data: DocumentData) -> list[Flowable]:
    return header_block(data) + customer_block(data, "Ship To") + items_table(data) + notes_block(data)


def invoice(data: DocumentData) -> list[Flowable]:
    flowables = header_block(data) + customer_block(data)
    terms = _table(
        [
            ["Invoice Date", format_date(data.issued_at)],
            ["Due Date", format_date(data.due_date)],
            ["Payment Terms", data.payment_terms],
        ],
        [1.5 * inch, 2 * inch],
        header=False,
    )
    flowables += [Spacer(1, 0.1 * inch), terms]

    rows = [["Product", "Quantity", "Unit Price", "Total"]]
    for item in data.items:
        quantity = str(item.quantity) if item.quantity is not None else format_oz(item.quantity_oz)
        name = f"{item.product_name} ({item.sku_name})" if item.sku_name else item.product_name
        rows.append([name, quantity, format_money(item.unit_price_cents), format_money(item.line_total_cents)])
    rows += [
        ["", "", "Subtotal", format_money(data.subtotal_cents)],
        ["", "", "Tax", format_money(data.tax_cents)],
        ["", "", "Total", format_money(data.total_cents)],
    ]
    flowables += [
        _para("Items", STYLE_SECTION),
        _table(rows, [3 * inch, 1.2 * inch, 1.4 * inch, 1.4 * inch], align_right_from=1),
    ]
    flowables += notes_block(data)
    if data.footer_notes:
        flowables += [Spacer(1, 0.2 * inch), _para(data.footer_notes, STYLE_SMALL)]
    return flowables


def delivery_receipt(data: DocumentData) -> list[Flowable]:
    flowables = header_block(data) + customer_block(data, "Deliver To")
    details = _table(
        [
            ["Delivery Date", format_date(data.delivery_date)],
            ["Delivery Address", data.delivery_address or "-"],
            ["Driver", data.driver_name or "-"],
        ],
        [1.5 * inch, 5.5 * inch],
        header=False,
    )
    flowables += [Spacer(1, 0.1 * inch), details]
    flowables += items_table(data) + notes_block(data)
    flowables += signature_lines(["Received By", "Driver"])
    flowables += [Spacer(1, 0.1 * inch), _para(RECEIPT_CONFIRMATION, STYLE_SMALL)]
    return flowables


def bill_of_lading(data: DocumentData) -> list[Flowable]:
    flowables = header_block(data)
    shipper = [_para("Shipper", STYLE_SECTION), _para(data.farm.name, STYLE_BODY)] + [
        _para(line, STYLE_BODY) for line in _party_lines(data.farm)
    ]
    consignee = customer_block(data, "Consignee")
    if data.delivery_address:
        consignee.append(_para(f"Destination: {data.delivery_address}", STYLE_BODY))
    parties = Table([[shipper, consignee]], colWidths=[3.5 * inch, 3.5 * inch])
    parties.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
    flowables.append(parties)

    rows = [["Description", "Weight (oz)"]]
    for item in data.items:
        rows.append([item.product_name, f"{item.quantity_oz:g}"])
    rows.append(["Total Weight", f"{data.total_weight_lbs} lbs"])
    flowables += [_para("Shipment", STYLE_SECTION), _table(rows, [5 * inch, 2 * inch], align_right_from=1)]

    carrier = _table(
        [
            ["Ship Date", format_date(data.ship_date)],
            ["Carrier Name", data.carrier_name or "-"],
            ["Vehicle ID", data.vehicle_id or "-"],
            ["Driver", data.driver_name or "-"],
            ["Trailer Number", data.trailer_number or "-"],
        ],
        [1.5 * inch, 5.5 * inch],
        header=False,
    )
    flowables += [_para("Carrier Information", STYLE_SECTION), carrier]
    if data.special_instructions:
        flowables += [
            _para("Special Instructions", STYLE_SECTION),
            _para(data.special_instructions, STYLE_BODY),
        ]
    flowables += signature_lines(["Shipper", "Carrier", "Consignee"])
    flowables += [Spacer(1, 0.1 * inch), _para(BOL_DISCLAIMER, STYLE_SMALL)]
    return flowables


TEMPLATES: dict[DocumentType, Callable[[DocumentData], list[Flowable]]] = {
    DocumentType.PACKING_SLIP: packing_slip,
    DocumentType.INVOICE: invoice,
    DocumentType.DELIVERY_RECEIPT: delivery_receipt,
    DocumentType.BILL_OF_LADING: bill_of_lading,
}


def render_document(data: DocumentData) -> bytes:
    """Render a document to PDF bytes."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=LETTER,
        leftMargin=0.75 * inch,
        rightMargin=0.75 * inch,
        topMargin=0.75 * inch,
        bottomMargin=0.75 * inch,
        title=f"{TITLES[data.type].title()} {data.document_number}",
        author=data.farm.name,
    )
    doc.build(TEMPLATES[DocumentType(data.type)](data))
    return buffer.getvalue()

"""
Document data assembled from order records.

Templates only see these plain dataclasses, so rendering never touches the
database session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Optional, Sequence

from farmops.core.database.entities import Customer, Farm, Order, OrderItem, Product, Sku
from farmops.core.models.domain import DocumentType, PaymentTerms

DEFAULT_PAYMENT_TERMS = "Due on Receipt"


@dataclass
class PartyInfo:
    """Name, contact and address lines of the farm or the customer."""

    name: str
    company_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address_lines: list[str] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.company_name or self.name


@dataclass
class DocumentItem:
    product_name: str
    quantity_oz: float
    harvest_date: Optional[datetime] = None
    sku_name: Optional[str] = None
    quantity: Optional[int] = None
    unit_price_cents: int = 0
    line_total_cents: int = 0


@dataclass
class DocumentData:
    """Everything a template needs to render one document."""

    type: DocumentType
    document_number: str
    issued_at: datetime
    farm: PartyInfo
    customer: Optional[PartyInfo]
    order_number: str
    order_date: datetime
    notes: Optional[str]
    items: list[DocumentItem]

    # Invoice
    due_date: Optional[datetime] = None
    payment_terms: str = DEFAULT_PAYMENT_TERMS
    subtotal_cents: int = 0
    tax_cents: int = 0
    total_cents: int = 0
    footer_notes: Optional[str] = None

    # Delivery receipt and bill of lading
    delivery_date: Optional[datetime] = None
    delivery_address: Optional[str] = None
    driver_name: Optional[str] = None
    ship_date: Optional[datetime] = None
    carrier_name: Optional[str] = None
    vehicle_id: Optional[str] = None
    trailer_number: Optional[str] = None
    special_instructions: Optional[str] = None

    @property
    def total_weight_oz(self) -> float:
        return sum(item.quantity_oz for item in self.items)

    @property
    def total_weight_lbs(self) -> str:
        return f"{self.total_weight_oz / 16:.2f}"


def address_lines(record) -> list[str]:
    """Street lines then ``City, ST 12345`` of a farm or customer record."""
    lines = [line for line in (record.address_line1, record.address_line2) if line]
    locality = ", ".join(part for part in (record.city, record.state) if part)
    if record.postal_code:
        locality = f"{locality} {record.postal_code}".strip()
    if locality:
        lines.append(locality)
    return lines


def farm_party(farm: Farm) -> PartyInfo:
    return PartyInfo(name=farm.name, phone=farm.phone, email=farm.email, address_lines=address_lines(farm))


def customer_party(order: Order, customer: Optional[Customer]) -> Optional[PartyInfo]:
    if customer is not None:
        return PartyInfo(
            name=customer.name,
            company_name=customer.company_name,
            phone=customer.phone,
            email=customer.email,
            address_lines=address_lines(customer),
        )
    if order.customer_name:
        return PartyInfo(name=order.customer_name, phone=order.customer_phone, email=order.customer_email)
    return None


def build_items(
    items: Sequence[OrderItem], products: Mapping[str, Product], skus: Mapping[str, Sku]
) -> list[DocumentItem]:
    """Document lines; the unit price comes from the SKU when the item has one."""
    lines = []
    for item in items:
        sku = skus.get(item.sku_id) if item.sku_id else None
        unit_price = sku.price if sku is not None else (item.unit_price_cents or 0)
        quantity = item.quantity if item.quantity is not None else item.quantity_oz
        line_total = item.line_total_cents if item.line_total_cents is not None else round(unit_price * quantity)
        product = products.get(item.product_id)
        lines.append(
            DocumentItem(
                product_name=product.name if product else "Unknown product",
                quantity_oz=item.quantity_oz,
                harvest_date=item.harvest_date,
                sku_name=sku.name if sku else None,
                quantity=item.quantity,
                unit_price_cents=unit_price,
                line_total_cents=line_total,
            )
        )
    return lines


def build_document_data(
    doc_type: DocumentType,
    document_number: str,
    *,
    farm: Farm,
    order: Order,
    customer: Optional[Customer],
    items: Sequence[OrderItem],
    products: Mapping[str, Product],
    skus: Mapping[str, Sku],
    issued_at: datetime,
    due_date: Optional[datetime] = None,
) -> DocumentData:
    lines = build_items(items, products, skus)
    data = DocumentData(
        type=doc_type,
        document_number=document_number,
        issued_at=issued_at,
        farm=farm_party(farm),
        customer=customer_party(order, customer),
        order_number=order.order_number,
        order_date=order.created_at,
        notes=order.notes,
        items=lines,
    )

    if doc_type == DocumentType.INVOICE:
        data.due_date = due_date
        if customer is not None and customer.payment_terms:
            data.payment_terms = PaymentTerms(customer.payment_terms).label
        data.subtotal_cents = sum(line.line_total_cents for line in lines)
        data.tax_cents = 0
        data.total_cents = data.subtotal_cents + data.tax_cents
        data.footer_notes = farm.invoice_footer_notes
    elif doc_type == DocumentType.DELIVERY_RECEIPT:
        data.delivery_date = order.delivery_date or issued_at
        data.delivery_address = order.delivery_address
        data.driver_name = order.driver_name
    elif doc_type == DocumentType.BILL_OF_LADING:
        data.ship_date = order.delivery_date or issued_at
        data.delivery_address = order.delivery_address
        data.carrier_name = order.carrier_name
        data.vehicle_id = order.vehicle_id
        data.driver_name = order.driver_name
        data.trailer_number = order.trailer_number
        data.special_instructions = order.special_instructions
    return data

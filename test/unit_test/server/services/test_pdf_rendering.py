"""
Unit tests for PDF document data and rendering.

Document data is built from in-memory records; rendering must produce a PDF
for every document type.
"""

from datetime import datetime

import pytest

from farmops.core.database.entities import Customer, Farm, Order, OrderItem, Product, Sku
from farmops.core.models.domain import CustomerType, DocumentType, PaymentTerms
from farmops.server.services.pdf import build_document_data, render_document
from farmops.server.services.pdf.data import address_lines, customer_party
from farmops.server.services.pdf.generator import format_date, format_money, format_oz

ISSUED = datetime(2026, 11, 20, 9, 30)


@pytest.fixture
def farm() -> Farm:
    return Farm(
        id="farm-1",
        name="Green Sprouts & Co",
        slug="green-sprouts",
        address_line1="12 Orchard Rd",
        city="Portland",
        state="OR",
        postal_code="97201",
        phone="555-0100",
        invoice_footer_notes="Thank you <3",
    )


@pytest.fixture
def order() -> Order:
    return Order(
        id="order-1",
        farm_id="farm-1",
        order_number="ORD-2026-001",
        customer_name="Cafe Verde",
        notes="Leave at the back door",
        delivery_address="1 Main St",
        carrier_name="Farm Truck",
        created_at=datetime(2026, 11, 1),
    )


@pytest.fixture
def customer() -> Customer:
    return Customer(
        id="cust-1",
        farm_id="farm-1",
        name="Ana Ruiz",
        company_name="Cafe Verde",
        email="ana@cafeverde.com",
        customer_type=CustomerType.RESTAURANT,
        payment_terms=PaymentTerms.NET_30,
    )


@pytest.fixture
def records():
    product = Product(id="prod-1", farm_id="farm-1", name="Sunflower")
    sku = Sku(id="sku-1", farm_id="farm-1", product_id="prod-1", sku_code="SUN-4OZ", name="4oz Clamshell", weight_oz=4, price=500)
    items = [
        OrderItem(
            id="item-1",
            order_id="order-1",
            product_id="prod-1",
            sku_id="sku-1",
            quantity=3,
            quantity_oz=12,
            harvest_date=datetime(2026, 11, 20),
            trays_needed=2,
            soak_date=datetime(2026, 11, 10),
            seed_date=datetime(2026, 11, 11),
            move_to_light_date=datetime(2026, 11, 14),
        ),
        OrderItem(
            id="item-2",
            order_id="order-1",
            product_id="prod-1",
            quantity_oz=20,
            unit_price_cents=150,
            harvest_date=datetime(2026, 11, 20),
            trays_needed=3,
            soak_date=datetime(2026, 11, 10),
            seed_date=datetime(2026, 11, 11),
            move_to_light_date=datetime(2026, 11, 14),
        ),
    ]
    return items, {"prod-1": product}, {"sku-1": sku}


def _data(doc_type, farm, order, customer, records, number="INV-00001"):
    items, products, skus = records
    return build_document_data(
        doc_type,
        number,
        farm=farm,
        order=order,
        customer=customer,
        items=items,
        products=products,
        skus=skus,
        issued_at=ISSUED,
        due_date=datetime(2026, 12, 20),
    )


class TestDocumentData:
    """Test assembling document data from records."""

    def test_invoice_totals(self, farm, order, customer, records):
        data = _data(DocumentType.INVOICE, farm, order, customer, records)
        first, second = data.items
        assert first.sku_name == "4oz Clamshell"
        assert first.unit_price_cents == 500
        assert first.line_total_cents == 1500
        # Items without a SKU are priced per ounce
        assert second.line_total_cents == 3000
        assert data.subtotal_cents == 4500
        assert data.total_cents == 4500
        assert data.payment_terms == "Net 30"
        assert data.due_date == datetime(2026, 12, 20)
        assert data.footer_notes == "Thank you <3"

    def test_bill_of_lading_weights(self, farm, order, customer, records):
        data = _data(DocumentType.BILL_OF_LADING, farm, order, customer, records, number="BOL-ORD-2026-001")
        assert data.total_weight_oz == 32
        assert data.total_weight_lbs == "2.00"
        assert data.carrier_name == "Farm Truck"
        assert data.ship_date == ISSUED
        assert data.due_date is None

    def test_delivery_receipt_defaults_to_issue_date(self, farm, order, customer, records):
        data = _data(DocumentType.DELIVERY_RECEIPT, farm, order, customer, records)
        assert data.delivery_date == ISSUED
        assert data.delivery_address == "1 Main St"

    def test_address_lines(self, farm):
        assert address_lines(farm) == ["12 Orchard Rd", "Portland, OR 97201"]

    def test_customer_party_falls_back_to_order(self, order):
        party = customer_party(order, None)
        assert party.display_name == "Cafe Verde"
        order.customer_name = None
        assert customer_party(order, None) is None


class TestRendering:
    """Test PDF output for every document type."""

    @pytest.mark.parametrize("doc_type", list(DocumentType))
    def test_renders_pdf(self, doc_type, farm, order, customer, records):
        pdf = render_document(_data(doc_type, farm, order, customer, records))
        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 1000

    def test_renders_without_customer(self, farm, order, records):
        order.special_instructions = "Keep <cold> & dry"
        pdf = render_document(_data(DocumentType.BILL_OF_LADING, farm, order, None, records))
        assert pdf.startswith(b"%PDF")


class TestFormatting:
    def test_format_money(self):
        assert format_money(123456) == "$1,234.56"
        assert format_money(0) == "$0.00"

    def test_format_oz(self):
        assert format_oz(12.0) == "12 oz"
        assert format_oz(2.5) == "2.5 oz"

    def test_format_date(self):
        assert format_date(datetime(2026, 1, 5)) == "Jan 05, 2026"
        assert format_date(None) == "-"

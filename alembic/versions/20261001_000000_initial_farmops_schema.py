"""Initial schema for farmops

Revision ID: 20261001_000000
Revises: None
Create Date: 2026-10-01 00:00:00.000000

This is the initial migration that creates every table of the farmops service:
- Tenancy tables (farms, users, farm memberships, user preferences)
- Team and CRM tables (employees, customers, customer tags)
- Catalog tables (product categories, products, SKUs)
- Order tables (orders, order items, tasks)
- Payment and document tables (payment settings, payments, generated documents)

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op
from farmops.core.models.domain import (
    CustomerType,
    DeliveryMethod,
    DocumentType,
    EmployeePosition,
    EmployeeStatus,
    FarmRole,
    InviteStatus,
    OrderItemStatus,
    OrderSource,
    OrderStatus,
    PaymentMethod,
    PaymentProcessor,
    PaymentStatus,
    PaymentTerms,
    PaymentTiming,
    TaskPriority,
    TaskStatus,
    TaskType,
    UnitSystem,
)

# revision identifiers, used by Alembic.
revision: str = "20261001_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _enum(enum_class) -> sa.Enum:
    # Same type name SQLModel derives for enum fields
    return sa.Enum(enum_class, name=enum_class.__name__.lower())


def _timestamps(updated: bool = True) -> list:
    columns = [sa.Column("created_at", sa.DateTime(), nullable=False)]
    if updated:
        columns.append(sa.Column("updated_at", sa.DateTime(), nullable=False))
    return columns


def _farm_fk() -> sa.Column:
    return sa.Column("farm_id", sa.String(), sa.ForeignKey("farms.id", ondelete="CASCADE"), nullable=False)


def upgrade() -> None:
    """Create all tables."""

    op.create_table(
        "users",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("external_id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("password_hash", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_external_id", "users", ["external_id"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "farms",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(50), nullable=False),
        sa.Column("timezone", sa.String(), nullable=False),
        sa.Column("currency", sa.String(), nullable=False),
        sa.Column("logo_url", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("website", sa.String(), nullable=True),
        sa.Column("address_line1", sa.String(), nullable=True),
        sa.Column("address_line2", sa.String(), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("postal_code", sa.String(), nullable=True),
        sa.Column("country", sa.String(), nullable=False),
        sa.Column("invoice_prefix", sa.String(10), nullable=False),
        sa.Column("next_invoice_number", sa.Integer(), nullable=False),
        sa.Column("invoice_footer_notes", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_farms_slug", "farms", ["slug"], unique=True)

    op.create_table(
        "farm_users",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        _farm_fk(),
        sa.Column("role", _enum(FarmRole), nullable=False),
        *_timestamps(updated=False),
        sa.UniqueConstraint("user_id", "farm_id", name="uq_farm_users_user_farm"),
    )
    op.create_index("ix_farm_users_user_id", "farm_users", ["user_id"])
    op.create_index("ix_farm_users_farm_id", "farm_users", ["farm_id"])

    op.create_table(
        "user_preferences",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        _farm_fk(),
        sa.Column("has_seen_layout_tutorial", sa.Boolean(), nullable=False),
        sa.Column("preferred_unit", _enum(UnitSystem), nullable=False),
        sa.Column("tutorial_completed_steps", sa.String(), nullable=False),
        sa.Column("tutorial_dismissed", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "farm_id", name="uq_user_preferences_user_farm"),
    )
    op.create_index("ix_user_preferences_user_id", "user_preferences", ["user_id"])
    op.create_index("ix_user_preferences_farm_id", "user_preferences", ["farm_id"])

    op.create_table(
        "employees",
        sa.Column("id", sa.String(), primary_key=True),
        _farm_fk(),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("position", _enum(EmployeePosition), nullable=False),
        sa.Column("status", _enum(EmployeeStatus), nullable=False),
        sa.Column("hire_date", sa.Date(), nullable=True),
        sa.Column("hourly_rate", sa.Float(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("invite_token", sa.String(), nullable=True),
        sa.Column("invite_status", _enum(InviteStatus), nullable=False),
        sa.Column("invited_at", sa.DateTime(), nullable=True),
        sa.Column("invite_expires_at", sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_employees_farm_id", "employees", ["farm_id"])
    op.create_index("ix_employees_invite_token", "employees", ["invite_token"], unique=True)

    op.create_table(
        "customers",
        sa.Column("id", sa.String(), primary_key=True),
        _farm_fk(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("company_name", sa.String(), nullable=True),
        sa.Column("address_line1", sa.String(), nullable=True),
        sa.Column("address_line2", sa.String(), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("postal_code", sa.String(), nullable=True),
        sa.Column("country", sa.String(), nullable=True),
        sa.Column("customer_type", _enum(CustomerType), nullable=False),
        sa.Column("payment_terms", _enum(PaymentTerms), nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_customers_farm_id", "customers", ["farm_id"])
    op.create_index("ix_customers_name", "customers", ["name"])
    op.create_index("ix_customers_email", "customers", ["email"])

    op.create_table(
        "customer_tags",
        sa.Column("id", sa.String(), primary_key=True),
        _farm_fk(),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("color", sa.String(), nullable=False),
        *_timestamps(updated=False),
        sa.UniqueConstraint("farm_id", "name", name="uq_customer_tags_farm_name"),
    )
    op.create_index("ix_customer_tags_farm_id", "customer_tags", ["farm_id"])

    op.create_table(
        "customer_tag_assignments",
        sa.Column(
            "customer_id", sa.String(), sa.ForeignKey("customers.id", ondelete="CASCADE"), primary_key=True
        ),
        sa.Column("tag_id", sa.String(), sa.ForeignKey("customer_tags.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("assigned_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "product_categories",
        sa.Column("id", sa.String(), primary_key=True),
        _farm_fk(),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False),
        *_timestamps(updated=False),
    )
    op.create_index("ix_product_categories_farm_id", "product_categories", ["farm_id"])

    op.create_table(
        "products",
        sa.Column("id", sa.String(), primary_key=True),
        _farm_fk(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column(
            "category_id", sa.String(), sa.ForeignKey("product_categories.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("days_soaking", sa.Integer(), nullable=True),
        sa.Column("days_germination", sa.Integer(), nullable=True),
        sa.Column("days_light", sa.Integer(), nullable=True),
        sa.Column("avg_yield_per_tray", sa.Float(), nullable=True),
        sa.Column("seed_weight_per_tray", sa.Float(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_products_farm_id", "products", ["farm_id"])

    op.create_table(
        "skus",
        sa.Column("id", sa.String(), primary_key=True),
        _farm_fk(),
        sa.Column("product_id", sa.String(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("sku_code", sa.String(50), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("weight_oz", sa.Float(), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False),
        sa.Column("stock_quantity", sa.Integer(), nullable=True),
        sa.Column("low_stock_threshold", sa.Integer(), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("image_url", sa.String(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("farm_id", "sku_code", name="uq_skus_farm_sku_code"),
    )
    op.create_index("ix_skus_farm_id", "skus", ["farm_id"])
    op.create_index("ix_skus_product_id", "skus", ["product_id"])

    op.create_table(
        "orders",
        sa.Column("id", sa.String(), primary_key=True),
        _farm_fk(),
        sa.Column("order_number", sa.String(), nullable=False),
        sa.Column("customer_id", sa.String(), sa.ForeignKey("customers.id", ondelete="SET NULL"), nullable=True),
        sa.Column("customer_name", sa.String(100), nullable=True),
        sa.Column("customer_email", sa.String(), nullable=True),
        sa.Column("customer_phone", sa.String(), nullable=True),
        sa.Column("status", _enum(OrderStatus), nullable=False),
        sa.Column("source", _enum(OrderSource), nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("total_cents", sa.Integer(), nullable=True),
        sa.Column("delivery_date", sa.DateTime(), nullable=True),
        sa.Column("delivery_method", _enum(DeliveryMethod), nullable=False),
        sa.Column("delivery_address", sa.String(), nullable=True),
        sa.Column("carrier_name", sa.String(), nullable=True),
        sa.Column("vehicle_id", sa.String(), nullable=True),
        sa.Column("driver_name", sa.String(), nullable=True),
        sa.Column("trailer_number", sa.String(), nullable=True),
        sa.Column("special_instructions", sa.String(), nullable=True),
        sa.Column("invoice_number", sa.String(), nullable=True),
        sa.Column("invoiced_at", sa.DateTime(), nullable=True),
        sa.Column("invoice_due_date", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("farm_id", "order_number", name="uq_orders_farm_order_number"),
    )
    op.create_index("ix_orders_farm_id", "orders", ["farm_id"])
    op.create_index("ix_orders_order_number", "orders", ["order_number"])
    op.create_index("ix_orders_customer_id", "orders", ["customer_id"])

    op.create_table(
        "order_items",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("order_id", sa.String(), sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_id", sa.String(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("sku_id", sa.String(), sa.ForeignKey("skus.id", ondelete="SET NULL"), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=True),
        sa.Column("quantity_oz", sa.Float(), nullable=False),
        sa.Column("unit_price_cents", sa.Integer(), nullable=True),
        sa.Column("line_total_cents", sa.Integer(), nullable=True),
        sa.Column("harvest_date", sa.DateTime(), nullable=False),
        sa.Column("overage_percent", sa.Float(), nullable=False),
        sa.Column("trays_needed", sa.Integer(), nullable=False),
        sa.Column("soak_date", sa.DateTime(), nullable=False),
        sa.Column("seed_date", sa.DateTime(), nullable=False),
        sa.Column("move_to_light_date", sa.DateTime(), nullable=False),
        sa.Column("actual_yield_oz", sa.Float(), nullable=True),
        sa.Column("actual_trays", sa.Integer(), nullable=True),
        sa.Column("seed_lot", sa.String(), nullable=True),
        sa.Column("status", _enum(OrderItemStatus), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])
    op.create_index("ix_order_items_product_id", "order_items", ["product_id"])
    op.create_index("ix_order_items_sku_id", "order_items", ["sku_id"])

    op.create_table(
        "tasks",
        sa.Column("id", sa.String(), primary_key=True),
        _farm_fk(),
        sa.Column(
            "order_item_id", sa.String(), sa.ForeignKey("order_items.id", ondelete="CASCADE"), nullable=True
        ),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("type", _enum(TaskType), nullable=False),
        sa.Column("status", _enum(TaskStatus), nullable=False),
        sa.Column("priority", _enum(TaskPriority), nullable=False),
        sa.Column("due_date", sa.DateTime(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("completed_by", sa.String(), nullable=True),
        sa.Column("completion_notes", sa.String(), nullable=True),
        sa.Column("actual_trays", sa.Integer(), nullable=True),
        sa.Column("seed_lot", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_tasks_farm_id", "tasks", ["farm_id"])
    op.create_index("ix_tasks_order_item_id", "tasks", ["order_item_id"])
    op.create_index("ix_tasks_type", "tasks", ["type"])
    op.create_index("ix_tasks_status", "tasks", ["status"])
    op.create_index("ix_tasks_due_date", "tasks", ["due_date"])

    op.create_table(
        "payment_settings",
        sa.Column("id", sa.String(), primary_key=True),
        _farm_fk(),
        sa.Column("payment_timing", _enum(PaymentTiming), nullable=False),
        sa.Column("preferred_processor", _enum(PaymentProcessor), nullable=False),
        sa.Column("platform_fee_percent", sa.Float(), nullable=False),
        sa.Column("accepts_online_payments", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_payment_settings_farm_id", "payment_settings", ["farm_id"], unique=True)

    op.create_table(
        "payments",
        sa.Column("id", sa.String(), primary_key=True),
        _farm_fk(),
        sa.Column("order_id", sa.String(), sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(), nullable=False),
        sa.Column("status", _enum(PaymentStatus), nullable=False),
        sa.Column("method", _enum(PaymentMethod), nullable=True),
        sa.Column("platform_fee", sa.Integer(), nullable=False),
        sa.Column("customer_email", sa.String(), nullable=True),
        sa.Column("customer_name", sa.String(), nullable=True),
        sa.Column("reference", sa.String(), nullable=True),
        sa.Column("payment_link_id", sa.String(), nullable=True),
        sa.Column("payment_link_url", sa.String(), nullable=True),
        sa.Column("payment_link_expires_at", sa.DateTime(), nullable=True),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.Column("refunded_amount", sa.Integer(), nullable=False),
        sa.Column("refund_reason", sa.String(), nullable=True),
        sa.Column("failure_reason", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_payments_farm_id", "payments", ["farm_id"])
    op.create_index("ix_payments_order_id", "payments", ["order_id"])
    op.create_index("ix_payments_payment_link_id", "payments", ["payment_link_id"], unique=True)

    op.create_table(
        "generated_documents",
        sa.Column("id", sa.String(), primary_key=True),
        _farm_fk(),
        sa.Column("order_id", sa.String(), sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=True),
        sa.Column("type", _enum(DocumentType), nullable=False),
        sa.Column("document_number", sa.String(), nullable=False),
        sa.Column("file_url", sa.String(), nullable=False),
        sa.Column("file_name", sa.String(), nullable=False),
        sa.Column("generated_at", sa.DateTime(), nullable=False),
        sa.Column("generated_by", sa.String(), nullable=True),
        sa.Column("due_date", sa.DateTime(), nullable=True),
        sa.Column("sent_at", sa.DateTime(), nullable=True),
        sa.Column("sent_to", sa.String(), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index("ix_generated_documents_farm_id", "generated_documents", ["farm_id"])
    op.create_index("ix_generated_documents_order_id", "generated_documents", ["order_id"])
    op.create_index("ix_generated_documents_generated_at", "generated_documents", ["generated_at"])


def downgrade() -> None:
    """Drop all tables."""
    for table in (
        "generated_documents",
        "payments",
        "payment_settings",
        "tasks",
        "order_items",
        "orders",
        "skus",
        "products",
        "product_categories",
        "customer_tag_assignments",
        "customer_tags",
        "customers",
        "employees",
        "user_preferences",
        "farm_users",
        "farms",
        "users",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_class in (
        DocumentType,
        PaymentMethod,
        PaymentStatus,
        PaymentProcessor,
        PaymentTiming,
        TaskPriority,
        TaskStatus,
        TaskType,
        OrderItemStatus,
        DeliveryMethod,
        OrderSource,
        OrderStatus,
        PaymentTerms,
        CustomerType,
        InviteStatus,
        EmployeeStatus,
        EmployeePosition,
        UnitSystem,
        FarmRole,
    ):
        _enum(enum_class).drop(bind, checkfirst=True)

"""Domain enumerations and role rules."""

from .enums import (
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
from .roles import ROLE_HIERARCHY, has_role_at_least, role_for_position

__all__ = [
    "CustomerType",
    "DeliveryMethod",
    "DocumentType",
    "EmployeePosition",
    "EmployeeStatus",
    "FarmRole",
    "InviteStatus",
    "OrderItemStatus",
    "OrderSource",
    "OrderStatus",
    "PaymentMethod",
    "PaymentProcessor",
    "PaymentStatus",
    "PaymentTerms",
    "PaymentTiming",
    "ROLE_HIERARCHY",
    "TaskPriority",
    "TaskStatus",
    "TaskType",
    "UnitSystem",
    "has_role_at_least",
    "role_for_position",
]

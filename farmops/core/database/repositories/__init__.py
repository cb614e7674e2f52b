"""
Database repository layer using SQLModel.

This package contains all repository classes organized by business domain.
Each module provides type-safe data access operations for its corresponding
SQLModel entity models.

Modules:
- base: AsyncBaseRepository and QueryBuilder utilities
- farms: farms, users, memberships and preferences
- products: product categories, products and SKUs
- customers: customers and customer tags
- employees: employees and invites
- orders: orders, order items and tasks
- payments: payment settings and payments
- documents: generated documents
"""

from .base import AsyncBaseRepository, QueryBuilder
from .customers import CustomerRepository, CustomerTagRepository
from .documents import GeneratedDocumentRepository
from .employees import EmployeeRepository
from .farms import FarmRepository, FarmUserRepository, UserPreferenceRepository, UserRepository
from .orders import OPEN_TASK_STATUSES, OrderItemRepository, OrderRepository, TaskRepository
from .payments import PaymentRepository, PaymentSettingsRepository
from .products import ProductCategoryRepository, ProductRepository, SkuRepository

__all__ = [
    "AsyncBaseRepository",
    "CustomerRepository",
    "CustomerTagRepository",
    "EmployeeRepository",
    "FarmRepository",
    "FarmUserRepository",
    "GeneratedDocumentRepository",
    "OPEN_TASK_STATUSES",
    "OrderItemRepository",
    "OrderRepository",
    "PaymentRepository",
    "PaymentSettingsRepository",
    "ProductCategoryRepository",
    "ProductRepository",
    "QueryBuilder",
    "SkuRepository",
    "TaskRepository",
    "UserPreferenceRepository",
    "UserRepository",
]

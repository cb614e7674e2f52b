"""
Database entity models.

This package contains all database entity models organized by business domain:

- farms: Farm, User, FarmUser, UserPreference
- employees: Employee
- customers: Customer, CustomerTag, CustomerTagAssignment
- products: ProductCategory, Product, Sku
- orders: Order, OrderItem, Task
- payments: PaymentSettings, Payment
- documents: GeneratedDocument

Importing this package registers every table on ``Base.metadata``.
"""

from .customers import Customer, CustomerTag, CustomerTagAssignment
from .documents import GeneratedDocument
from .employees import Employee
from .farms import Farm, FarmUser, User, UserPreference
from .orders import Order, OrderItem, Task
from .payments import Payment, PaymentSettings
from .products import Product, ProductCategory, Sku

__all__ = [
    "Customer",
    "CustomerTag",
    "CustomerTagAssignment",
    "Employee",
    "Farm",
    "FarmUser",
    "GeneratedDocument",
    "Order",
    "OrderItem",
    "Payment",
    "PaymentSettings",
    "Product",
    "ProductCategory",
    "Sku",
    "Task",
    "User",
    "UserPreference",
]

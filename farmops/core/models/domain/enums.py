"""
Domain enumerations.

Values are stored and serialized by name, so every member's value equals its name.
"""

from enum import Enum


class FarmRole(str, Enum):
    OWNER = "OWNER"
    ADMIN = "ADMIN"
    FARM_MANAGER = "FARM_MANAGER"
    SALESPERSON = "SALESPERSON"
    FARM_OPERATOR = "FARM_OPERATOR"


class EmployeePosition(str, Enum):
    FARM_MANAGER = "FARM_MANAGER"
    SALESPERSON = "SALESPERSON"
    FARM_OPERATOR = "FARM_OPERATOR"


class EmployeeStatus(str, Enum):
    ACTIVE = "ACTIVE"
    ON_LEAVE = "ON_LEAVE"
    TERMINATED = "TERMINATED"


class InviteStatus(str, Enum):
    NOT_INVITED = "NOT_INVITED"
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    EXPIRED = "EXPIRED"
    REVOKED = "REVOKED"


class CustomerType(str, Enum):
    RETAIL = "RETAIL"
    WHOLESALE = "WHOLESALE"
    RESTAURANT = "RESTAURANT"
    FARMERS_MARKET = "FARMERS_MARKET"
    DISTRIBUTOR = "DISTRIBUTOR"
    OTHER = "OTHER"


class PaymentTerms(str, Enum):
    DUE_ON_RECEIPT = "DUE_ON_RECEIPT"
    NET_7 = "NET_7"
    NET_15 = "NET_15"
    NET_30 = "NET_30"
    NET_60 = "NET_60"

    @property
    def label(self) -> str:
        if self is PaymentTerms.DUE_ON_RECEIPT:
            return "Due on Receipt"
        return self.value.replace("NET_", "Net ")


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    READY = "READY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class OrderItemStatus(str, Enum):
    PENDING = "PENDING"
    SOAKING = "SOAKING"
    GERMINATING = "GERMINATING"
    GROWING = "GROWING"
    HARVESTED = "HARVESTED"
    CANCELLED = "CANCELLED"


class OrderSource(str, Enum):
    MANUAL = "MANUAL"
    STOREFRONT = "STOREFRONT"


class DeliveryMethod(str, Enum):
    PICKUP = "PICKUP"
    DELIVERY = "DELIVERY"


class TaskType(str, Enum):
    SOAK = "SOAK"
    SEED = "SEED"
    MOVE_TO_LIGHT = "MOVE_TO_LIGHT"
    HARVESTING = "HARVESTING"
    GENERAL = "GENERAL"


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"
    CANCELLED = "CANCELLED"


class PaymentTiming(str, Enum):
    UPFRONT = "UPFRONT"
    ON_READY = "ON_READY"


class PaymentProcessor(str, Enum):
    STRIPE = "STRIPE"
    PAYPAL = "PAYPAL"
    MANUAL = "MANUAL"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    CHECK = "CHECK"
    CARD = "CARD"
    BANK_TRANSFER = "BANK_TRANSFER"
    PAYMENT_LINK = "PAYMENT_LINK"
    OTHER = "OTHER"


class DocumentType(str, Enum):
    PACKING_SLIP = "PACKING_SLIP"
    INVOICE = "INVOICE"
    DELIVERY_RECEIPT = "DELIVERY_RECEIPT"
    BILL_OF_LADING = "BILL_OF_LADING"

    @property
    def slug(self) -> str:
        """Kebab-case name used in generated file names."""
        return self.value.lower().replace("_", "-")


class UnitSystem(str, Enum):
    FEET = "FEET"
    METERS = "METERS"

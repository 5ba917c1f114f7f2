from enum import Enum


class UserType(str, Enum):
    ADMIN = "admin"
    CLIENT = "client"
    VENDOR_OWNER = "vendor_owner"
    EMPLOYEE = "employee"
    DRIVER = "driver"


class VendorType(str, Enum):
    INDIVIDUAL = "individual"
    BUSINESS = "business"


class WalletStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"


class TransactionType(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class CashOutStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class OrderStatus(str, Enum):
    NEW = "new"
    PROCESSING = "processing"
    READY_TO_DELIVERY = "ready_to_delivery"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentMethodType(str, Enum):
    WALLET = "wallet"
    EXTERNAL = "external"
    COD = "cod"


class DeliveryStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


def values(enum_class) -> list:
    return [member.value for member in enum_class]

from .user import User, Client, Employee, UserNote
from .wallet import Wallet, Transaction
from .subscription import Subscription
from .image import Image
from .category import Category, Subcategory
from .vendor import Vendor, PaymentMethod, VendorNote, vendor_categories
from .product import Product, ProductSpec
from .order import Order, Delivery
from .cash_out_request import CashOutRequest

__all__ = [
    "User",
    "Client",
    "Employee",
    "UserNote",
    "Wallet",
    "Transaction",
    "Subscription",
    "Image",
    "Category",
    "Subcategory",
    "Vendor",
    "PaymentMethod",
    "VendorNote",
    "vendor_categories",
    "Product",
    "ProductSpec",
    "Order",
    "Delivery",
    "CashOutRequest",
]

"""Sample marketplace data for local development (``flask seed-orders``)."""
import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func

from marketplace.extensions import db
from marketplace.enums import (
    UserType, VendorType, SubscriptionStatus, OrderStatus, PaymentMethodType, DeliveryStatus,
)
from marketplace.models import (
    User, Client, Employee, UserNote, Wallet, Transaction, Vendor, PaymentMethod, VendorNote,
    Subscription, Category, Subcategory, Image, Product, ProductSpec, Order, Delivery, CashOutRequest,
)
from marketplace.models.vendor import vendor_categories
from marketplace.services.auth_service import AuthService

logger = logging.getLogger(__name__)

CLIENT_PASSWORD = "password123"
VENDOR_PASSWORD = "vendor123"

USERS = [
    ("John Doe", "+251966666666", "john.doe@example.com", UserType.CLIENT),
    ("Jane Smith", "+1234567891", "jane.smith@example.com", UserType.CLIENT),
    ("Mike Johnson", "+1234567892", "mike.johnson@example.com", UserType.CLIENT),
    ("Sarah Wilson", "+1234567893", "sarah.wilson@example.com", UserType.CLIENT),
    ("Tech Store Owner", "+251966666667", "owner@techstore.com", UserType.VENDOR_OWNER),
    ("Fashion Store Owner", "+1234567895", "owner@fashionstore.com", UserType.VENDOR_OWNER),
]

CATEGORIES = {
    "Electronics": ("Electronic devices and gadgets", ["Laptops", "Smartphones", "Headphones"]),
    "Fashion": ("Clothing and accessories", ["Men's Clothing", "Women's Clothing", "Shoes"]),
    "Home & Garden": ("Home improvement and garden supplies", ["Furniture", "Kitchen"]),
    "Sports": ("Sports equipment and accessories", ["Fitness", "Outdoor"]),
}

SUBSCRIPTIONS = [("Basic", "99.99"), ("Premium", "199.99")]

# name, description, owner phone, subscription plan, categories
VENDORS = [
    ("Tech Store", "Leading electronics retailer", "+251966666667", "Basic", ["Electronics"]),
    ("Fashion Store", "Trendy fashion and clothing", "+1234567895", "Premium", ["Fashion"]),
]

# name, description, price, stock, threshold, discount, vendor, subcategory
PRODUCTS = [
    ('MacBook Pro 16"', "High-performance laptop for professionals", "2499.99", 50, 10, False, "Tech Store", "Laptops"),
    ("iPhone 15 Pro", "Latest iPhone with advanced features", "999.99", 100, 15, True, "Tech Store", "Smartphones"),
    ("Sony WH-1000XM5", "Premium noise-canceling headphones", "399.99", 75, 10, False, "Tech Store", "Headphones"),
    ("Designer Jeans", "Premium denim jeans for men", "89.99", 200, 20, False, "Fashion Store", "Men's Clothing"),
    ("Summer Dress", "Elegant summer dress for women", "79.99", 150, 15, True, "Fashion Store", "Women's Clothing"),
    ("Running Shoes", "Comfortable running shoes for all terrains", "129.99", 80, 10, False, "Fashion Store", "Shoes"),
]

# client index, product index, quantity, payment method, status, created at
ORDERS = [
    (0, 0, 1, PaymentMethodType.WALLET, OrderStatus.NEW, "2024-01-15T10:30:00"),
    (1, 1, 2, PaymentMethodType.EXTERNAL, OrderStatus.PROCESSING, "2024-01-15T11:15:00"),
    (2, 2, 1, PaymentMethodType.COD, OrderStatus.READY_TO_DELIVERY, "2024-01-15T14:20:00"),
    (3, 3, 3, PaymentMethodType.WALLET, OrderStatus.COMPLETED, "2024-01-14T09:45:00"),
    (0, 4, 1, PaymentMethodType.EXTERNAL, OrderStatus.NEW, "2024-01-16T08:30:00"),
    (1, 5, 2, PaymentMethodType.COD, OrderStatus.PROCESSING, "2024-01-16T12:15:00"),
    (2, 0, 1, PaymentMethodType.WALLET, OrderStatus.READY_TO_DELIVERY, "2024-01-16T15:30:00"),
    (3, 1, 1, PaymentMethodType.EXTERNAL, OrderStatus.COMPLETED, "2024-01-14T16:45:00"),
    (0, 2, 1, PaymentMethodType.COD, OrderStatus.NEW, "2024-01-17T10:00:00"),
    (1, 4, 2, PaymentMethodType.WALLET, OrderStatus.PROCESSING, "2024-01-17T11:30:00"),
]

DELIVERY_FOR_ORDER = {
    OrderStatus.NEW: DeliveryStatus.PENDING,
    OrderStatus.PROCESSING: DeliveryStatus.PENDING,
    OrderStatus.READY_TO_DELIVERY: DeliveryStatus.IN_PROGRESS,
    OrderStatus.COMPLETED: DeliveryStatus.DELIVERED,
    OrderStatus.CANCELLED: DeliveryStatus.CANCELLED,
}

CLEAR_ORDER = [
    Delivery, Order, CashOutRequest, Transaction, ProductSpec, PaymentMethod,
    VendorNote, Employee, UserNote, Client,
]


def clear_data():
    """Delete everything except admin accounts, children before parents"""
    db.session.execute(vendor_categories.delete())
    for model in CLEAR_ORDER:
        db.session.query(model).delete()
    # vendors point at images while images point at products that point at vendors
    db.session.query(Vendor).update({
        Vendor.cover_image_id: None,
        Vendor.fayda_image_id: None,
        Vendor.business_license_image_id: None,
    })
    for model in (Image, Product, Vendor, Wallet, Subcategory, Category, Subscription):
        db.session.query(model).delete()
    db.session.query(User).filter(User.type != UserType.ADMIN).delete()
    db.session.commit()


def seed_orders() -> dict:
    """Replace marketplace data with the sample set and return row counts"""
    clear_data()

    users = [
        AuthService.register_user(
            phone_number=phone,
            password=CLIENT_PASSWORD if user_type == UserType.CLIENT else VENDOR_PASSWORD,
            user_type=user_type,
            name=name,
            email=email,
            is_verified=True,
            commit=False,
        )
        for name, phone, email, user_type in USERS
    ]
    by_phone = {user.phone_number: user for user in users}

    subscriptions = {}
    for plan, amount in SUBSCRIPTIONS:
        subscriptions[plan] = Subscription(
            plan=plan,
            amount=Decimal(amount),
            start_date=datetime(2024, 1, 1),
            end_date=datetime(2024, 12, 31),
            status=SubscriptionStatus.ACTIVE,
        )
        db.session.add(subscriptions[plan])

    categories, subcategories = {}, {}
    for name, (description, children) in CATEGORIES.items():
        category = Category(name=name, description=description)
        categories[name] = category
        for child in children:
            subcategories[child] = Subcategory(name=child, category=category)
            db.session.add(subcategories[child])
        db.session.add(category)
    db.session.flush()

    vendors = {}
    for name, description, phone, plan, category_names in VENDORS:
        owner = by_phone[phone]
        vendor = Vendor(
            user_id=owner.id,
            name=name,
            type=VendorType.BUSINESS,
            description=description,
            is_approved=True,
            status=True,
            subscription=subscriptions[plan],
            wallet=owner.wallet,
            categories=[categories[c] for c in category_names],
        )
        vendors[name] = vendor
        db.session.add(vendor)
    db.session.flush()

    products = []
    for name, description, price, stock, threshold, discount, vendor_name, subcategory_name in PRODUCTS:
        subcategory = subcategories[subcategory_name]
        product = Product(
            vendor=vendors[vendor_name],
            category=subcategory.category,
            subcategory=subcategory,
            name=name,
            description=description,
            price=Decimal(price),
            stock=stock,
            low_stock_threshold=threshold,
            has_discount=discount,
        )
        products.append(product)
        db.session.add(product)
    db.session.flush()

    clients = [user.client for user in users if user.type == UserType.CLIENT]
    for client_index, product_index, quantity, payment_method, status, created_at in ORDERS:
        product, client = products[product_index], clients[client_index]
        order = Order(
            client=client,
            vendor=product.vendor,
            product=product,
            quantity=quantity,
            unit_price=product.price,
            payment_method=payment_method,
            status=status,
            created_at=datetime.fromisoformat(created_at),
        )
        order.calculate_total()
        order.delivery = Delivery(address=client.address or "Addis Ababa", status=DELIVERY_FOR_ORDER[status])
        db.session.add(order)

    db.session.commit()
    counts = {
        "users": len(users),
        "vendors": len(vendors),
        "products": len(products),
        "orders": Order.query.count(),
    }
    logger.info("Seeded sample data: %s", counts)
    return counts


def order_summary() -> dict:
    """Order counts grouped by status and by vendor"""
    by_status = dict(
        db.session.query(Order.status, func.count(Order.id)).group_by(Order.status).all()
    )
    by_vendor = (
        db.session.query(Vendor.name, func.count(Order.id))
        .join(Order, Order.vendor_id == Vendor.id)
        .group_by(Vendor.name)
        .order_by(Vendor.name)
        .all()
    )
    return {
        "total": Order.query.count(),
        "by_status": {status.value: count for status, count in by_status.items()},
        "by_vendor": dict(by_vendor),
    }

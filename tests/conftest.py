import io
import os
from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from marketplace import create_app, db
from marketplace.config import TestingConfig
from marketplace.enums import (
    UserType, VendorType, SubscriptionStatus, OrderStatus, PaymentMethodType, DeliveryStatus,
)
from marketplace.models.user import User, Client
from marketplace.models.wallet import Wallet
from marketplace.models.subscription import Subscription
from marketplace.models.category import Category, Subcategory
from marketplace.models.image import Image
from marketplace.models.vendor import Vendor, PaymentMethod
from marketplace.models.product import Product, ProductSpec
from marketplace.models.order import Order, Delivery

PASSWORD = "password123"


def _image_file(name="photo.png"):
    return (io.BytesIO(b"\x89PNG\r\n\x1a\nfake-image-bytes"), name)


@pytest.fixture
def image_file():
    """Factory for fresh in-memory uploads in multipart requests"""
    return _image_file


@pytest.fixture
def stored_path(app):
    """Disk path behind an /uploads/ URL"""
    def _path(image_url):
        return os.path.join(app.config["UPLOAD_FOLDER"], image_url[len("/uploads/"):])
    return _path


@pytest.fixture
def break_commits(app, monkeypatch):
    """Call to make later commits on the test's session fail like a dropped connection"""
    def _commit():
        raise OperationalError("COMMIT", {}, Exception("server closed the connection"))

    def _break():
        monkeypatch.setattr(db.session(), "commit", _commit)

    return _break


@pytest.fixture(scope="function")
def app(tmp_path):
    """Create application for testing"""
    class Config(TestingConfig):
        UPLOAD_FOLDER = str(tmp_path / "uploads")

    app = create_app(Config)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Test client"""
    return app.test_client()


def _make_user(name, phone, email, user_type, balance=None):
    user = User(
        name=name,
        email=email,
        phone_number=phone,
        type=user_type,
        is_verified=True,
        is_active=True,
    )
    user.set_password(PASSWORD)
    db.session.add(user)
    db.session.flush()  # Flush to get user.id

    if user_type == UserType.CLIENT:
        db.session.add(Client(user_id=user.id, address="Bole, Addis Ababa"))
    if balance is not None:
        db.session.add(Wallet(user_id=user.id, balance=Decimal(balance)))

    db.session.commit()
    return user


# User fixtures
@pytest.fixture
def admin_user(app):
    return _make_user("Test Admin", "+251900000001", "admin@test.com", UserType.ADMIN)


@pytest.fixture
def client_user(app):
    """Client with 500.00 in the wallet"""
    return _make_user("Test Client", "+251900000002", "client@test.com", UserType.CLIENT, "500.00")


@pytest.fixture
def vendor_owner(app):
    return _make_user("Shop Owner", "+251900000003", "owner@test.com", UserType.VENDOR_OWNER, "0.00")


@pytest.fixture
def other_vendor_owner(app):
    return _make_user("Second Owner", "+251900000004", "owner2@test.com", UserType.VENDOR_OWNER, "0.00")


def _login(client, phone):
    response = client.post(
        "/api/auth/login", json={"phone_number": phone, "password": PASSWORD}
    )
    assert response.status_code == 200, f"Login failed: {response.json}"
    return response.json["access_token"]


# Auth header fixtures
@pytest.fixture
def admin_headers(client, admin_user):
    return {"Authorization": f"Bearer {_login(client, admin_user.phone_number)}"}


@pytest.fixture
def client_headers(client, client_user):
    return {"Authorization": f"Bearer {_login(client, client_user.phone_number)}"}


@pytest.fixture
def owner_headers(client, vendor_owner):
    return {"Authorization": f"Bearer {_login(client, vendor_owner.phone_number)}"}


# Data fixtures
@pytest.fixture
def subscription(app):
    subscription = Subscription(
        plan="Basic",
        amount=Decimal("99.99"),
        start_date=datetime(2024, 1, 1),
        end_date=datetime(2024, 12, 31),
        status=SubscriptionStatus.ACTIVE,
    )
    db.session.add(subscription)
    db.session.commit()
    return subscription


@pytest.fixture
def category(app):
    category = Category(name="Electronics", description="Electronic devices")
    db.session.add(category)
    db.session.flush()
    db.session.add(Image(image_url="/uploads/electronics.png", category_id=category.id))
    db.session.commit()
    return category


@pytest.fixture
def subcategory(app, category):
    subcategory = Subcategory(name="Laptops", category_id=category.id)
    db.session.add(subcategory)
    db.session.commit()
    return subcategory


@pytest.fixture
def vendor(app, vendor_owner, subscription, category):
    vendor = Vendor(
        user_id=vendor_owner.id,
        name="Tech Store",
        type=VendorType.BUSINESS,
        description="Leading electronics retailer",
        is_approved=True,
        subscription_id=subscription.id,
        wallet_id=vendor_owner.wallet.id,
        categories=[category],
    )
    db.session.add(vendor)
    db.session.flush()
    db.session.add(PaymentMethod(
        vendor_id=vendor.id, name="CBE", account_number="1000123456", account_holder="Shop Owner",
    ))
    db.session.commit()
    return vendor


@pytest.fixture
def product(app, vendor, category, subcategory):
    product = Product(
        vendor_id=vendor.id,
        category_id=category.id,
        subcategory_id=subcategory.id,
        name="MacBook Pro 16",
        description="High-performance laptop",
        price=Decimal("2499.99"),
        stock=50,
        specs=[ProductSpec(key="RAM", value="32GB")],
    )
    db.session.add(product)
    db.session.commit()
    return product


@pytest.fixture
def order(app, client_user, vendor, product):
    order = Order(
        client_id=client_user.client.id,
        vendor_id=vendor.id,
        product_id=product.id,
        quantity=2,
        unit_price=product.price,
        payment_method=PaymentMethodType.WALLET,
        status=OrderStatus.NEW,
    )
    order.calculate_total()
    order.delivery = Delivery(address="Bole, Addis Ababa", status=DeliveryStatus.PENDING)
    db.session.add(order)
    db.session.commit()
    return order

from marketplace.models.base import BaseModel, enum_column
from marketplace.extensions import db
from marketplace.enums import OrderStatus, PaymentMethodType, DeliveryStatus


class Order(BaseModel):
    __tablename__ = "orders"

    client_id = db.Column(
        db.Integer, db.ForeignKey("clients.id", ondelete="SET NULL"), nullable=True, index=True
    )
    vendor_id = db.Column(
        db.Integer, db.ForeignKey("vendors.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(15, 2), nullable=False)
    total_amount = db.Column(db.Numeric(15, 2), nullable=False)
    payment_method = enum_column(PaymentMethodType, "order_payment_methods", nullable=False)
    status = enum_column(OrderStatus, "order_statuses", default=OrderStatus.NEW, nullable=False)

    # Relationships
    client = db.relationship("Client", back_populates="orders")
    vendor = db.relationship("Vendor", back_populates="orders")
    product = db.relationship("Product", back_populates="orders")
    delivery = db.relationship(
        "Delivery", back_populates="order", uselist=False, cascade="all, delete-orphan"
    )

    def calculate_total(self):
        self.total_amount = self.unit_price * self.quantity
        return self.total_amount

    def to_dict(self):
        data = super().to_dict()
        client_user = self.client.user if self.client else None
        data["client"] = client_user.to_summary() if client_user else None
        data["vendor"] = {"id": self.vendor.id, "name": self.vendor.name} if self.vendor else None
        data["product"] = (
            {"id": self.product.id, "name": self.product.name, "price": float(self.product.price)}
            if self.product else None
        )
        data["delivery"] = self.delivery.to_dict(include_order=False) if self.delivery else None
        return data


class Delivery(BaseModel):
    __tablename__ = "deliveries"

    order_id = db.Column(
        db.Integer, db.ForeignKey("orders.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    address = db.Column(db.Text)
    status = enum_column(DeliveryStatus, "delivery_statuses", default=DeliveryStatus.PENDING, nullable=False)

    order = db.relationship("Order", back_populates="delivery")

    def to_dict(self, include_order=True):
        data = super().to_dict()
        if include_order and self.order:
            data["order"] = {
                "id": self.order.id,
                "status": self.order.status.value,
                "total_amount": float(self.order.total_amount),
            }
        return data

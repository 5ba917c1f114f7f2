import logging

from sqlalchemy import or_

from marketplace.extensions import db
from marketplace.enums import OrderStatus, DeliveryStatus
from marketplace.models.order import Order, Delivery
from marketplace.models.product import Product
from marketplace.models.user import Client, User
from marketplace.models.vendor import Vendor
from marketplace.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)

# Delivery states that an order status change carries over to the delivery
DELIVERY_FOLLOWS = {
    OrderStatus.CANCELLED: DeliveryStatus.CANCELLED,
    OrderStatus.COMPLETED: DeliveryStatus.DELIVERED,
}


class OrderService:

    @staticmethod
    def get_order_by_id(order_id: int) -> Order:
        order = db.session.get(Order, order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    @staticmethod
    def _filtered(status: str = None, vendor_id: int = None, client_id: int = None, search: str = None):
        query = Order.query
        if status:
            query = query.filter(Order.status == OrderStatus(status))
        if vendor_id:
            query = query.filter(Order.vendor_id == vendor_id)
        if client_id:
            query = query.filter(Order.client_id == client_id)
        if search:
            pattern = f"%{search}%"
            query = (
                query.outerjoin(Product, Order.product_id == Product.id)
                .outerjoin(Vendor, Order.vendor_id == Vendor.id)
                .outerjoin(Client, Order.client_id == Client.id)
                .outerjoin(User, Client.user_id == User.id)
                .filter(or_(
                    Product.name.ilike(pattern),
                    Vendor.name.ilike(pattern),
                    User.name.ilike(pattern),
                    User.phone_number.ilike(pattern),
                ))
            )
        return query.order_by(Order.created_at.desc(), Order.id.desc())

    @staticmethod
    def get_orders(page: int = 1, per_page: int = 20, **filters):
        return OrderService._filtered(**filters).paginate(
            page=page, per_page=per_page, error_out=False
        )

    @staticmethod
    def all_orders(**filters) -> list:
        return OrderService._filtered(**filters).all()

    @staticmethod
    def get_vendor_orders(vendor_id: int, page: int = 1, per_page: int = 20):
        if not db.session.get(Vendor, vendor_id):
            raise NotFoundError("Vendor not found")
        return OrderService.get_orders(page=page, per_page=per_page, vendor_id=vendor_id)

    @staticmethod
    def recent_orders(limit: int = 10) -> list:
        return Order.query.order_by(Order.created_at.desc(), Order.id.desc()).limit(limit).all()

    @staticmethod
    def update_order_status(order_id: int, new_status: str) -> Order:
        try:
            status = OrderStatus(new_status)
        except ValueError:
            raise ValueError("Invalid status") from None

        order = OrderService.get_order_by_id(order_id)
        previous = order.status
        order.status = status
        delivery_status = DELIVERY_FOLLOWS.get(status)
        if order.delivery and delivery_status:
            order.delivery.status = delivery_status
        db.session.commit()

        logger.info("Order %s status %s -> %s", order.id, previous.value, status.value)
        return order

    @staticmethod
    def get_deliveries(status: str = None, page: int = 1, per_page: int = 20):
        query = Delivery.query
        if status:
            query = query.filter(Delivery.status == DeliveryStatus(status))
        return query.order_by(Delivery.created_at.desc(), Delivery.id.desc()).paginate(
            page=page, per_page=per_page, error_out=False
        )

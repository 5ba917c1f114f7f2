from sqlalchemy import func

from marketplace.extensions import db
from marketplace.enums import TransactionType, DeliveryStatus, CashOutStatus
from marketplace.models.cash_out_request import CashOutRequest
from marketplace.models.order import Order, Delivery
from marketplace.models.product import Product
from marketplace.models.user import User
from marketplace.models.vendor import Vendor
from marketplace.models.wallet import Transaction


class DashboardService:

    @staticmethod
    def get_stats() -> dict:
        total_revenue = (
            db.session.query(func.coalesce(func.sum(Transaction.amount), 0))
            .filter(Transaction.type == TransactionType.CREDIT)
            .scalar()
        )
        return {
            "totalUsers": User.query.filter_by(deleted_at=None).count(),
            "totalVendors": Vendor.query.filter_by(status=True).count(),
            "totalProducts": Product.query.count(),
            "totalOrders": Order.query.count(),
            "totalRevenue": float(total_revenue or 0),
            "pendingDeliveries": Delivery.query.filter(
                Delivery.status.in_([DeliveryStatus.PENDING, DeliveryStatus.IN_PROGRESS])
            ).count(),
            "pendingCashouts": CashOutRequest.query.filter_by(status=CashOutStatus.PENDING).count(),
            "pendingVendorApprovals": Vendor.query.filter_by(status=True, is_approved=False).count(),
        }

from marketplace.models.base import BaseModel, enum_column
from marketplace.extensions import db
from marketplace.enums import SubscriptionStatus


class Subscription(BaseModel):
    """Vendor subscription plan"""

    __tablename__ = "subscriptions"

    amount = db.Column(db.Numeric(15, 2), nullable=False)
    plan = db.Column(db.String(100), nullable=False)
    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)
    status = enum_column(SubscriptionStatus, "subscription_statuses", nullable=False)

    vendors = db.relationship("Vendor", back_populates="subscription", lazy="dynamic")

    def statistics(self) -> dict:
        vendors = self.vendors.all()
        total_vendors = len(vendors)
        return {
            "totalVendors": total_vendors,
            "activeVendors": sum(1 for v in vendors if v.status),
            "approvedVendors": sum(1 for v in vendors if v.is_approved),
            "totalRevenue": float(self.amount) * total_vendors,
        }

    def to_dict(self, include_vendors=False):
        data = super().to_dict()
        if include_vendors:
            data["vendors"] = [
                {
                    "id": v.id,
                    "name": v.name,
                    "type": v.type.value,
                    "status": v.status,
                    "is_approved": v.is_approved,
                    "user": v.user.to_summary() if v.user else None,
                }
                for v in self.vendors
            ]
        return data

from marketplace.models.base import BaseModel, enum_column
from marketplace.extensions import db
from marketplace.enums import CashOutStatus


class CashOutRequest(BaseModel):
    """Request to withdraw wallet balance to an external payment method"""

    __tablename__ = "cash_out_requests"

    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    vendor_id = db.Column(
        db.Integer, db.ForeignKey("vendors.id", ondelete="SET NULL"), nullable=True, index=True
    )
    amount = db.Column(db.Numeric(15, 2), nullable=False)
    reason = db.Column(db.String(255))
    status = enum_column(CashOutStatus, "cash_out_statuses", default=CashOutStatus.PENDING, nullable=False)

    user = db.relationship("User")
    vendor = db.relationship("Vendor")

    @property
    def is_pending(self) -> bool:
        return self.status == CashOutStatus.PENDING

    def to_dict(self):
        data = super().to_dict()
        data["user"] = self.user.to_summary() if self.user else None
        data["vendor"] = (
            {"id": self.vendor.id, "name": self.vendor.name, "type": self.vendor.type.value}
            if self.vendor else None
        )
        return data

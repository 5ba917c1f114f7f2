from marketplace.models.base import BaseModel, enum_column
from marketplace.extensions import db
from marketplace.enums import VendorType


vendor_categories = db.Table(
    "vendor_categories",
    db.Column("vendor_id", db.Integer, db.ForeignKey("vendors.id", ondelete="CASCADE"), primary_key=True),
    db.Column("category_id", db.Integer, db.ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)


class Vendor(BaseModel):
    """Seller account, owned by a vendor_owner user.

    ``status`` is the soft-delete flag: False means the vendor sits in the
    recycle bin and is hidden from regular listings.
    """

    __tablename__ = "vendors"

    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    name = db.Column(db.String(255), unique=True, nullable=False, index=True)
    type = enum_column(VendorType, "vendor_types", nullable=False)
    description = db.Column(db.Text)
    is_approved = db.Column(db.Boolean, default=False, nullable=False)
    status = db.Column(db.Boolean, default=True, nullable=False)

    subscription_id = db.Column(
        db.Integer, db.ForeignKey("subscriptions.id", ondelete="SET NULL"), nullable=True, index=True
    )
    wallet_id = db.Column(db.Integer, db.ForeignKey("wallets.id", ondelete="SET NULL"), nullable=True)
    cover_image_id = db.Column(db.Integer, db.ForeignKey("images.id", ondelete="SET NULL"))
    fayda_image_id = db.Column(db.Integer, db.ForeignKey("images.id", ondelete="SET NULL"))
    business_license_image_id = db.Column(db.Integer, db.ForeignKey("images.id", ondelete="SET NULL"))

    # Relationships
    user = db.relationship("User", back_populates="vendor")
    subscription = db.relationship("Subscription", back_populates="vendors")
    wallet = db.relationship("Wallet")
    cover_image = db.relationship("Image", foreign_keys=[cover_image_id])
    fayda_image = db.relationship("Image", foreign_keys=[fayda_image_id])
    business_license_image = db.relationship("Image", foreign_keys=[business_license_image_id])
    categories = db.relationship("Category", secondary=vendor_categories, back_populates="vendors")
    payment_methods = db.relationship(
        "PaymentMethod",
        back_populates="vendor",
        lazy="dynamic",
        foreign_keys="PaymentMethod.vendor_id",
        cascade="all, delete-orphan",
    )
    notes = db.relationship(
        "VendorNote", back_populates="vendor", lazy="dynamic", cascade="all, delete-orphan"
    )
    employees = db.relationship("Employee", back_populates="vendor", lazy="dynamic")
    products = db.relationship("Product", back_populates="vendor", lazy="dynamic")
    orders = db.relationship("Order", back_populates="vendor", lazy="dynamic")

    @staticmethod
    def _image_url(image):
        return {"image_url": image.image_url} if image else None

    def to_dict(self, include_wallet=False):
        data = {
            "id": self.id,
            "name": self.name,
            "type": self.type.value if self.type else None,
            "description": self.description,
            "isApproved": self.is_approved is True,
            "status": self.status,
            "cover_image": self._image_url(self.cover_image),
            "fayda_image": self._image_url(self.fayda_image),
            "business_license_image": self._image_url(self.business_license_image),
            "vendorCategories": [
                {"id": c.id, "name": c.name, "description": c.description}
                for c in self.categories
            ],
            "paymentMethods": [pm.to_dict() for pm in self.payment_methods],
            "subscription": self.subscription.to_dict() if self.subscription else None,
            "price": float(self.subscription.amount) if self.subscription else 0,
            "user": self.user.to_summary() if self.user else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_wallet:
            data["wallet"] = (
                {
                    "id": self.wallet.id,
                    "balance": float(self.wallet.balance),
                    "status": self.wallet.status.value,
                }
                if self.wallet
                else None
            )
        return data


class PaymentMethod(BaseModel):
    """Payout destination belonging to a vendor or to a user"""

    __tablename__ = "payment_methods"

    vendor_id = db.Column(
        db.Integer, db.ForeignKey("vendors.id", ondelete="CASCADE"), nullable=True, index=True
    )
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )
    name = db.Column(db.String(255), nullable=False)
    account_number = db.Column(db.String(100), nullable=False)
    account_holder = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(100))
    details = db.Column(db.JSON, default=dict)

    vendor = db.relationship("Vendor", back_populates="payment_methods", foreign_keys=[vendor_id])
    user = db.relationship("User", back_populates="payment_methods", foreign_keys=[user_id])


class VendorNote(BaseModel):
    __tablename__ = "vendor_notes"

    vendor_id = db.Column(
        db.Integer, db.ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)

    vendor = db.relationship("Vendor", back_populates="notes")

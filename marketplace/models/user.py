from marketplace.models.base import BaseModel, SoftDeleteMixin, enum_column
from marketplace.extensions import db
from marketplace.enums import UserType
import bcrypt


class User(BaseModel, SoftDeleteMixin):
    __tablename__ = "users"

    name = db.Column(db.String(255))
    email = db.Column(db.String(255), unique=True, nullable=True, index=True)
    phone_number = db.Column(db.String(20), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    type = enum_column(UserType, "user_types", nullable=False, index=True)
    is_verified = db.Column(db.Boolean, default=False, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Relationships
    wallet = db.relationship(
        "Wallet", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    client = db.relationship(
        "Client", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    employee = db.relationship(
        "Employee", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    vendor = db.relationship("Vendor", back_populates="user", uselist=False)
    payment_methods = db.relationship(
        "PaymentMethod",
        back_populates="user",
        lazy="dynamic",
        foreign_keys="PaymentMethod.user_id",
        cascade="all, delete-orphan",
    )
    notes = db.relationship(
        "UserNote", back_populates="user", lazy="dynamic", cascade="all, delete-orphan"
    )

    def set_password(self, password: str):
        self.password_hash = bcrypt.hashpw(
            password.encode("utf-8"), bcrypt.gensalt()
        ).decode("utf-8")

    def check_password(self, password: str) -> bool:
        return bcrypt.checkpw(
            password.encode("utf-8"), self.password_hash.encode("utf-8")
        )

    def to_summary(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone_number": self.phone_number,
            "type": self.type.value if self.type else None,
        }

    def to_dict(self, include_sensitive=False):
        data = super().to_dict()
        if not include_sensitive:
            data.pop("password_hash", None)
            data.pop("deleted_at", None)
        return data


class Client(BaseModel):
    __tablename__ = "clients"

    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    address = db.Column(db.Text)
    image_id = db.Column(db.Integer, db.ForeignKey("images.id", ondelete="SET NULL"))

    user = db.relationship("User", back_populates="client")
    image = db.relationship("Image", foreign_keys=[image_id])
    orders = db.relationship("Order", back_populates="client", lazy="dynamic")


class Employee(BaseModel):
    __tablename__ = "employees"

    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    vendor_id = db.Column(
        db.Integer, db.ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role = db.Column(db.String(100), nullable=False)

    user = db.relationship("User", back_populates="employee")
    vendor = db.relationship("Vendor", back_populates="employees")

    def to_dict(self):
        data = super().to_dict()
        data["user"] = self.user.to_summary() if self.user else None
        data["vendor"] = {"id": self.vendor.id, "name": self.vendor.name} if self.vendor else None
        return data


class UserNote(BaseModel):
    __tablename__ = "user_notes"

    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)

    user = db.relationship("User", back_populates="notes")

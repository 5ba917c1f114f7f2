from marketplace.models.base import BaseModel
from marketplace.extensions import db


class Product(BaseModel):
    __tablename__ = "products"

    vendor_id = db.Column(
        db.Integer,
        db.ForeignKey("vendors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id = db.Column(
        db.Integer,
        db.ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    subcategory_id = db.Column(
        db.Integer,
        db.ForeignKey("subcategories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name = db.Column(db.String(255), nullable=False, index=True)
    description = db.Column(db.Text)
    price = db.Column(db.Numeric(15, 2), nullable=False)
    has_discount = db.Column(db.Boolean, default=False, nullable=False)
    sold_in_bulk = db.Column(db.Boolean, default=False, nullable=False)
    stock = db.Column(db.Integer, default=0, nullable=False)
    low_stock_threshold = db.Column(db.Integer, default=10, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Relationships
    vendor = db.relationship("Vendor", back_populates="products")
    category = db.relationship("Category", back_populates="products")
    subcategory = db.relationship("Subcategory", back_populates="products")
    images = db.relationship(
        "Image", back_populates="product", cascade="all, delete-orphan",
        foreign_keys="Image.product_id",
    )
    specs = db.relationship(
        "ProductSpec", back_populates="product", cascade="all, delete-orphan",
        order_by="ProductSpec.id",
    )
    orders = db.relationship("Order", back_populates="product", lazy="dynamic")

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.low_stock_threshold

    def to_dict(self):
        data = super().to_dict()
        data["is_low_stock"] = self.is_low_stock
        data["vendor"] = (
            {"id": self.vendor.id, "name": self.vendor.name, "type": self.vendor.type.value}
            if self.vendor else None
        )
        data["category"] = {"id": self.category.id, "name": self.category.name} if self.category else None
        data["subcategory"] = (
            {"id": self.subcategory.id, "name": self.subcategory.name} if self.subcategory else None
        )
        data["images"] = [image.to_dict() for image in self.images]
        data["specs"] = [{"key": spec.key, "value": spec.value} for spec in self.specs]
        return data


class ProductSpec(BaseModel):
    __tablename__ = "product_specs"

    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    key = db.Column(db.String(255), nullable=False)
    value = db.Column(db.String(500), nullable=False)

    product = db.relationship("Product", back_populates="specs")

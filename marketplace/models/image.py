from marketplace.models.base import BaseModel
from marketplace.extensions import db


class Image(BaseModel):
    """Uploaded image, optionally attached to a category, subcategory or product"""

    __tablename__ = "images"

    image_url = db.Column(db.String(500), nullable=False)
    category_id = db.Column(
        db.Integer, db.ForeignKey("categories.id", ondelete="CASCADE"), nullable=True, index=True
    )
    subcategory_id = db.Column(
        db.Integer, db.ForeignKey("subcategories.id", ondelete="CASCADE"), nullable=True, index=True
    )
    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"), nullable=True, index=True
    )

    category = db.relationship("Category", back_populates="images", foreign_keys=[category_id])
    subcategory = db.relationship("Subcategory", back_populates="images", foreign_keys=[subcategory_id])
    product = db.relationship("Product", back_populates="images", foreign_keys=[product_id])

    def to_dict(self):
        return {
            "id": self.id,
            "image_url": self.image_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

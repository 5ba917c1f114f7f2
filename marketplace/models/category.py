from marketplace.models.base import BaseModel
from marketplace.extensions import db


class Category(BaseModel):
    """Category model"""
    __tablename__ = 'categories'

    name = db.Column(db.String(255), unique=True, nullable=False, index=True)
    description = db.Column(db.Text)

    # Relationships
    images = db.relationship(
        'Image', back_populates='category', cascade='all, delete-orphan',
        foreign_keys='Image.category_id',
    )
    subcategories = db.relationship('Subcategory', back_populates='category', lazy='dynamic')
    products = db.relationship('Product', back_populates='category', lazy='dynamic')
    vendors = db.relationship('Vendor', secondary='vendor_categories', back_populates='categories')

    def to_dict(self, include_images=True):
        data = super().to_dict()
        if include_images:
            data['images'] = [image.to_dict() for image in self.images]
        return data


class Subcategory(BaseModel):
    """Subcategory model; ``status`` False marks a soft-deleted row"""
    __tablename__ = 'subcategories'
    __table_args__ = (db.UniqueConstraint('category_id', 'name', name='uq_subcategory_name'),)

    name = db.Column(db.String(255), nullable=False)
    category_id = db.Column(
        db.Integer, db.ForeignKey('categories.id', ondelete='CASCADE'), nullable=False, index=True
    )
    status = db.Column(db.Boolean, default=True, nullable=False)

    category = db.relationship('Category', back_populates='subcategories')
    images = db.relationship(
        'Image', back_populates='subcategory', cascade='all, delete-orphan',
        foreign_keys='Image.subcategory_id',
    )
    products = db.relationship('Product', back_populates='subcategory', lazy='dynamic')

    def to_dict(self, include_category=False):
        data = super().to_dict()
        data['images'] = [image.to_dict() for image in self.images]
        if include_category and self.category:
            data['category'] = {'id': self.category.id, 'name': self.category.name}
        return data

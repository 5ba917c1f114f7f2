import logging

from sqlalchemy import or_

from marketplace.extensions import db
from marketplace.models.category import Category, Subcategory
from marketplace.models.product import Product, ProductSpec
from marketplace.models.vendor import Vendor
from marketplace.services.category_service import replace_images
from marketplace.services.storage_service import StorageService
from marketplace.utils.exceptions import NotFoundError, ConflictError

logger = logging.getLogger(__name__)

MAX_PRODUCT_IMAGES = 10

PRODUCT_FIELDS = (
    "name", "description", "price", "has_discount", "sold_in_bulk",
    "stock", "low_stock_threshold", "is_active", "category_id", "subcategory_id",
)


class ProductService:
    """Product service handling product operations"""

    @staticmethod
    def _check_placement(category_id: int, subcategory_id: int) -> None:
        if not db.session.get(Category, category_id):
            raise NotFoundError("Category not found")
        subcategory = db.session.get(Subcategory, subcategory_id)
        if not subcategory or not subcategory.status:
            raise NotFoundError("Subcategory not found")
        if subcategory.category_id != category_id:
            raise ValueError("Subcategory does not belong to the selected category")

    @staticmethod
    def _check_images(files) -> list:
        files = [f for f in files if f and f.filename]
        if len(files) > MAX_PRODUCT_IMAGES:
            raise ValueError(f"At most {MAX_PRODUCT_IMAGES} images are allowed")
        StorageService.validate_files(files)
        return files

    @staticmethod
    def create_product(data: dict, files=()) -> Product:
        """Create new product"""
        vendor = db.session.get(Vendor, data["vendor_id"])
        if not vendor or not vendor.status:
            raise NotFoundError("Vendor not found")
        ProductService._check_placement(data["category_id"], data["subcategory_id"])
        files = ProductService._check_images(files)

        try:
            product = Product(
                vendor_id=vendor.id,
                **{key: data[key] for key in PRODUCT_FIELDS if data.get(key) is not None},
            )
            product.specs = [ProductSpec(key=s["key"], value=s["value"]) for s in data.get("specs") or []]
            db.session.add(product)
            db.session.flush()
            StorageService.create_images(files, f"product-{product.name}", product_id=product.id)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        db.session.refresh(product)
        logger.info("Created product %s for vendor %s", product.id, vendor.id)
        return product

    @staticmethod
    def update_product(product_id: int, data: dict, files=()) -> Product:
        """Update product"""
        product = ProductService.get_product_by_id(product_id)
        category_id = data.get("category_id", product.category_id)
        subcategory_id = data.get("subcategory_id", product.subcategory_id)
        if "category_id" in data or "subcategory_id" in data:
            ProductService._check_placement(category_id, subcategory_id)
        files = ProductService._check_images(files)

        keep_ids = data.get("keepImages")
        kept = len(product.images) if keep_ids is None else len(
            [image for image in product.images if image.id in set(keep_ids)]
        )
        if kept + len(files) > MAX_PRODUCT_IMAGES:
            raise ValueError(f"At most {MAX_PRODUCT_IMAGES} images are allowed")

        try:
            removed_urls = replace_images(
                product, keep_ids, files, f"product-{product.name}", product_id=product.id
            )
            if data.get("specs") is not None:
                product.specs = [ProductSpec(key=s["key"], value=s["value"]) for s in data["specs"]]
            product.update(commit=False, **{key: data[key] for key in PRODUCT_FIELDS if key in data})
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        StorageService.remove_files(removed_urls)
        db.session.refresh(product)
        return product

    @staticmethod
    def delete_product(product_id: int) -> None:
        product = ProductService.get_product_by_id(product_id)
        if product.orders.count():
            raise ConflictError("Product has orders and cannot be deleted")
        try:
            image_urls = StorageService.delete_images(product.images)
            db.session.delete(product)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        StorageService.remove_files(image_urls)
        logger.info("Deleted product %s", product_id)

    @staticmethod
    def get_product_by_id(product_id: int) -> Product:
        """Get product by ID"""
        product = db.session.get(Product, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    def _filtered(search: str = None, category_id: int = None, subcategory_id: int = None,
                  vendor_id: int = None):
        query = Product.query
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Product.name.ilike(pattern), Product.description.ilike(pattern)))
        if category_id:
            query = query.filter_by(category_id=category_id)
        if subcategory_id:
            query = query.filter_by(subcategory_id=subcategory_id)
        if vendor_id:
            query = query.filter_by(vendor_id=vendor_id)
        return query.order_by(Product.created_at.desc(), Product.id.desc())

    @staticmethod
    def search_products(page: int = 1, per_page: int = 20, **filters):
        """Search products with filters"""
        return ProductService._filtered(**filters).paginate(
            page=page, per_page=per_page, error_out=False
        )

    @staticmethod
    def report_rows(**filters) -> list:
        return [
            [
                p.id,
                p.name,
                p.vendor.name if p.vendor else "",
                p.category.name if p.category else "",
                p.subcategory.name if p.subcategory else "",
                float(p.price),
                p.stock,
                "Yes" if p.is_active else "No",
                p.created_at.isoformat() if p.created_at else "",
            ]
            for p in ProductService._filtered(**filters).all()
        ]

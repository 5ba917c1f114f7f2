import logging

from marketplace.extensions import db
from marketplace.models.category import Category, Subcategory
from marketplace.services.storage_service import StorageService
from marketplace.utils.exceptions import NotFoundError, ConflictError

logger = logging.getLogger(__name__)


def replace_images(owner, keep_ids, new_files, prefix: str, **owner_key) -> list:
    """Drop the owner's images not listed in ``keep_ids`` and attach new uploads.

    ``keep_ids`` of None keeps every existing image. Returns the URLs of the
    dropped images for ``StorageService.remove_files`` once committed.
    """
    new_files = [f for f in new_files if f and f.filename]
    StorageService.validate_files(new_files)
    removed_urls = []
    if keep_ids is not None:
        keep = set(keep_ids)
        removed = [image for image in owner.images if image.id not in keep]
        for image in removed:
            owner.images.remove(image)
        removed_urls = StorageService.delete_images(removed)
    StorageService.create_images(new_files, prefix, **owner_key)
    return removed_urls


class CategoryService:

    @staticmethod
    def create_category(name: str, files, description: str = None) -> Category:
        if Category.query.filter_by(name=name).first():
            raise ConflictError("Category already exists")
        StorageService.validate_files(files)

        try:
            category = Category(name=name, description=description)
            db.session.add(category)
            db.session.flush()
            StorageService.create_images(files, f"category-{name}", category_id=category.id)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info("Created category %s (%s)", category.id, name)
        return category

    @staticmethod
    def list_categories() -> list:
        return Category.query.order_by(Category.name).all()

    @staticmethod
    def get_category(category_id: int) -> Category:
        category = db.session.get(Category, category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    @staticmethod
    def update_category(category_id: int, files=(), keep_image_ids=None, **kwargs) -> Category:
        category = CategoryService.get_category(category_id)
        name = kwargs.get("name")
        if name and name != category.name and Category.query.filter_by(name=name).first():
            raise ConflictError("Category name already exists")

        try:
            removed_urls = replace_images(
                category, keep_image_ids, files, f"category-{name or category.name}",
                category_id=category.id,
            )
            category.update(commit=False, **kwargs)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        StorageService.remove_files(removed_urls)
        db.session.refresh(category)
        return category

    @staticmethod
    def delete_category(category_id: int) -> None:
        category = CategoryService.get_category(category_id)
        if category.subcategories.count() or category.products.count():
            raise ConflictError("Category has subcategories or products and cannot be deleted")
        try:
            category.vendors = []
            image_urls = StorageService.delete_images(category.images)
            db.session.delete(category)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        StorageService.remove_files(image_urls)
        logger.info("Deleted category %s", category_id)

    @staticmethod
    def list_subcategories(category_id: int) -> list:
        category = CategoryService.get_category(category_id)
        return category.subcategories.filter_by(status=True).order_by(Subcategory.name).all()


class SubcategoryService:

    @staticmethod
    def create_subcategory(name: str, category_id: int, files):
        """Create a subcategory, or restore a soft-deleted one with the same name.

        Returns ``(subcategory, restored)``.
        """
        CategoryService.get_category(category_id)
        existing = Subcategory.query.filter_by(category_id=category_id, name=name).first()
        if existing and existing.status:
            raise ConflictError("Subcategory already exists in this category")
        StorageService.validate_files(files)

        old_urls = []
        try:
            if existing:
                subcategory = existing
                subcategory.status = True
                old_urls = StorageService.delete_images(subcategory.images)
                subcategory.images = []
            else:
                subcategory = Subcategory(name=name, category_id=category_id)
                db.session.add(subcategory)
            db.session.flush()
            StorageService.create_images(files, f"subcategory-{name}", subcategory_id=subcategory.id)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        StorageService.remove_files(old_urls)
        db.session.refresh(subcategory)
        logger.info("%s subcategory %s", "Restored" if existing else "Created", subcategory.id)
        return subcategory, existing is not None

    @staticmethod
    def get_subcategory(subcategory_id: int, include_deleted: bool = False) -> Subcategory:
        subcategory = db.session.get(Subcategory, subcategory_id)
        if not subcategory or (not subcategory.status and not include_deleted):
            raise NotFoundError("Subcategory not found")
        return subcategory

    @staticmethod
    def list_subcategories(deleted: bool = False) -> list:
        return Subcategory.query.filter_by(status=not deleted).order_by(Subcategory.name).all()

    @staticmethod
    def update_subcategory(subcategory_id: int, files=(), keep_image_ids=None, **kwargs) -> Subcategory:
        subcategory = SubcategoryService.get_subcategory(subcategory_id)
        category_id = kwargs.get("category_id", subcategory.category_id)
        name = kwargs.get("name", subcategory.name)
        if category_id != subcategory.category_id:
            CategoryService.get_category(category_id)
        clash = Subcategory.query.filter(
            Subcategory.category_id == category_id,
            Subcategory.name == name,
            Subcategory.id != subcategory.id,
        ).first()
        if clash:
            raise ConflictError("Subcategory already exists in this category")

        try:
            removed_urls = replace_images(
                subcategory, keep_image_ids, files, f"subcategory-{name}",
                subcategory_id=subcategory.id,
            )
            subcategory.update(commit=False, name=name, category_id=category_id)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        StorageService.remove_files(removed_urls)
        db.session.refresh(subcategory)
        return subcategory

    @staticmethod
    def soft_delete(subcategory_id: int) -> Subcategory:
        subcategory = SubcategoryService.get_subcategory(subcategory_id)
        subcategory.update(status=False)
        logger.info("Subcategory %s moved to recycle bin", subcategory.id)
        return subcategory

    @staticmethod
    def restore(subcategory_id: int) -> Subcategory:
        subcategory = SubcategoryService.get_subcategory(subcategory_id, include_deleted=True)
        if subcategory.status:
            raise ValueError("Subcategory is not deleted")
        subcategory.update(status=True)
        return subcategory

    @staticmethod
    def permanent_delete(subcategory_id: int) -> None:
        subcategory = SubcategoryService.get_subcategory(subcategory_id, include_deleted=True)
        if subcategory.products.count():
            raise ConflictError("Subcategory has products and cannot be permanently deleted")
        try:
            image_urls = StorageService.delete_images(subcategory.images)
            db.session.delete(subcategory)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        StorageService.remove_files(image_urls)
        logger.info("Subcategory %s permanently deleted", subcategory_id)

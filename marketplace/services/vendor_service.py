import logging

from sqlalchemy import or_

from marketplace.extensions import db
from marketplace.enums import UserType, VendorType
from marketplace.models.category import Category
from marketplace.models.subscription import Subscription
from marketplace.models.user import User
from marketplace.models.vendor import Vendor, PaymentMethod, VendorNote
from marketplace.services.storage_service import StorageService
from marketplace.services.wallet_service import WalletService
from marketplace.utils.exceptions import NotFoundError, ConflictError, PermissionDeniedError

logger = logging.getLogger(__name__)

# Document image each vendor type has to upload next to the cover image
DOCUMENT_FIELDS = {
    VendorType.INDIVIDUAL: "fayda_image",
    VendorType.BUSINESS: "business_license_image",
}
IMAGE_FIELDS = ("cover_image", "fayda_image", "business_license_image")


class VendorService:

    @staticmethod
    def _resolve_categories(category_ids) -> list:
        ids = set(category_ids)
        categories = Category.query.filter(Category.id.in_(ids)).all()
        if len(categories) != len(ids):
            raise ValueError("One or more categories not found")
        return categories

    @staticmethod
    def create_vendor(current_user: User, vendor_type: VendorType, data: dict, files: dict):
        """Register (or revive) the caller's vendor.

        Returns ``(vendor, created)``; ``created`` is False when a soft-deleted
        vendor was brought back instead.
        """
        if current_user.type == UserType.ADMIN:
            raise PermissionDeniedError("Admins cannot register vendors")

        existing = Vendor.query.filter_by(user_id=current_user.id).first()
        if existing and existing.status:
            raise ValueError("User already has an active vendor")

        if not db.session.get(Subscription, data["subscription_id"]):
            raise ValueError("Subscription not found")
        categories = VendorService._resolve_categories(data["category_ids"])

        duplicate = Vendor.query.filter(Vendor.name == data["name"])
        if existing:
            duplicate = duplicate.filter(Vendor.id != existing.id)
        if duplicate.first():
            raise ConflictError("Vendor name already exists")

        StorageService.validate_files([f for f in files.values() if f])

        try:
            wallet = WalletService.get_or_create_wallet(current_user.id)
            vendor = existing or Vendor(user_id=current_user.id)
            vendor.name = data["name"]
            vendor.type = vendor_type
            vendor.description = data.get("description")
            vendor.subscription_id = data["subscription_id"]
            vendor.wallet_id = wallet.id
            vendor.is_approved = False
            vendor.status = True
            vendor.categories = categories

            old_images = []
            for field in IMAGE_FIELDS:
                file = files.get(field)
                current = getattr(vendor, field)
                if file and file.filename:
                    setattr(vendor, field, StorageService.create_image(file, f"vendor-{field}"))
                elif field != "cover_image" and field != DOCUMENT_FIELDS[vendor_type]:
                    # revived with the other vendor type
                    setattr(vendor, field, None)
                else:
                    continue
                if current:
                    old_images.append(current)

            if existing:
                vendor.payment_methods.delete()
            db.session.add(vendor)
            db.session.flush()
            old_urls = StorageService.delete_images(old_images)
            db.session.add(PaymentMethod(vendor_id=vendor.id, **data["payment_method"]))
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        StorageService.remove_files(old_urls)

        logger.info(
            "%s %s vendor %s for user %s",
            "Revived" if existing else "Created", vendor_type.value, vendor.id, current_user.id,
        )
        return vendor, existing is None

    @staticmethod
    def get_vendor(vendor_id: int, include_deleted: bool = False) -> Vendor:
        vendor = db.session.get(Vendor, vendor_id)
        if not vendor or (not vendor.status and not include_deleted):
            raise NotFoundError("Vendor not found")
        return vendor

    @staticmethod
    def list_active_vendors() -> list:
        return Vendor.query.filter_by(status=True).order_by(Vendor.created_at.desc(), Vendor.id.desc()).all()

    @staticmethod
    def search_vendors(search: str = None, is_approved: bool = None, vendor_type: str = None,
                       page: int = 1, per_page: int = 20):
        query = Vendor.query.filter_by(status=True)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Vendor.name.ilike(pattern), Vendor.description.ilike(pattern)))
        if is_approved is not None:
            query = query.filter_by(is_approved=is_approved)
        if vendor_type:
            query = query.filter(Vendor.type == VendorType(vendor_type))
        return query.order_by(Vendor.created_at.desc(), Vendor.id.desc()).paginate(
            page=page, per_page=per_page, error_out=False
        )

    @staticmethod
    def list_deleted(page: int = 1, per_page: int = 20):
        return Vendor.query.filter_by(status=False).order_by(Vendor.updated_at.desc(), Vendor.id.desc()).paginate(
            page=page, per_page=per_page, error_out=False
        )

    @staticmethod
    def set_approval(vendor_id: int, is_approved: bool) -> Vendor:
        vendor = VendorService.get_vendor(vendor_id)
        vendor.update(is_approved=is_approved)
        logger.info("Vendor %s approval set to %s", vendor.id, is_approved)
        return vendor

    @staticmethod
    def get_own_vendor(current_user: User) -> Vendor:
        vendor = Vendor.query.filter_by(user_id=current_user.id).first()
        if not vendor:
            raise NotFoundError("Vendor not found")
        return vendor

    @staticmethod
    def set_status(vendor: Vendor, status: bool) -> Vendor:
        vendor.update(status=status)
        logger.info("Vendor %s status set to %s", vendor.id, status)
        return vendor

    @staticmethod
    def soft_delete(vendor_id: int) -> Vendor:
        vendor = VendorService.get_vendor(vendor_id)
        vendor.update(status=False)
        logger.info("Vendor %s moved to recycle bin", vendor.id)
        return vendor

    @staticmethod
    def restore(vendor_id: int) -> Vendor:
        vendor = VendorService.get_vendor(vendor_id, include_deleted=True)
        if vendor.status:
            raise ValueError("Vendor is not deleted")
        vendor.update(status=True)
        logger.info("Vendor %s restored", vendor.id)
        return vendor

    @staticmethod
    def permanent_delete(vendor_id: int) -> None:
        vendor = VendorService.get_vendor(vendor_id, include_deleted=True)
        if vendor.products.count() or vendor.orders.count():
            raise ConflictError("Vendor has products or orders and cannot be permanently deleted")

        try:
            images = [getattr(vendor, field) for field in IMAGE_FIELDS if getattr(vendor, field)]
            vendor.cover_image = vendor.fayda_image = vendor.business_license_image = None
            vendor.categories = []
            vendor.payment_methods.delete()
            vendor.notes.delete()
            for employee in vendor.employees:
                db.session.delete(employee)
            db.session.flush()
            image_urls = StorageService.delete_images(images)
            db.session.delete(vendor)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        StorageService.remove_files(image_urls)
        logger.info("Vendor %s permanently deleted", vendor_id)

    # Payment methods

    @staticmethod
    def list_payment_methods(vendor_id: int) -> list:
        return VendorService.get_vendor(vendor_id).payment_methods.order_by(PaymentMethod.id).all()

    @staticmethod
    def add_payment_method(vendor_id: int, **data) -> PaymentMethod:
        VendorService.get_vendor(vendor_id)
        return PaymentMethod(vendor_id=vendor_id, **data).save()

    @staticmethod
    def delete_payment_method(vendor_id: int, pm_id: int) -> None:
        payment_method = PaymentMethod.query.filter_by(id=pm_id, vendor_id=vendor_id).first()
        if not payment_method:
            raise NotFoundError("Payment method not found for this vendor")
        payment_method.delete()

    # Notes

    @staticmethod
    def list_notes(vendor_id: int) -> list:
        return VendorService.get_vendor(vendor_id, include_deleted=True).notes.order_by(
            VendorNote.created_at.desc(), VendorNote.id.desc()
        ).all()

    @staticmethod
    def create_note(vendor_id: int, title: str, description: str) -> VendorNote:
        VendorService.get_vendor(vendor_id, include_deleted=True)
        return VendorNote(vendor_id=vendor_id, title=title, description=description).save()

    @staticmethod
    def delete_note(vendor_id: int, note_id: int) -> None:
        note = VendorNote.query.filter_by(id=note_id, vendor_id=vendor_id).first()
        if not note:
            raise NotFoundError("Note not found")
        note.delete()

    @staticmethod
    def report_rows() -> list:
        vendors = Vendor.query.order_by(Vendor.id).all()
        return [
            [
                v.id,
                v.name,
                v.type.value,
                "Yes" if v.is_approved else "No",
                "Active" if v.status else "Deleted",
                v.user.name if v.user else "",
                v.user.phone_number if v.user else "",
                v.subscription.plan if v.subscription else "",
                float(v.wallet.balance) if v.wallet else 0,
                v.created_at.isoformat() if v.created_at else "",
            ]
            for v in vendors
        ]

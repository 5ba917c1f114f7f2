import logging
import secrets

from sqlalchemy import or_

from marketplace.extensions import db
from marketplace.enums import UserType
from marketplace.models.user import User, Employee, UserNote
from marketplace.models.vendor import Vendor, PaymentMethod
from marketplace.services.auth_service import AuthService
from marketplace.utils.exceptions import NotFoundError, ConflictError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "email", "phone_number", "is_active", "is_verified", "type")


class UserService:

    @staticmethod
    def list_users(user_type: str = None, search: str = None, page: int = 1, per_page: int = 20):
        query = User.query.filter_by(deleted_at=None)
        if user_type:
            query = query.filter(User.type == UserType(user_type))
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(User.name.ilike(pattern), User.email.ilike(pattern), User.phone_number.ilike(pattern))
            )
        return query.order_by(User.created_at.desc(), User.id.desc()).paginate(
            page=page, per_page=per_page, error_out=False
        )

    @staticmethod
    def get_user(user_id: int) -> User:
        return AuthService.get_user_by_id(user_id)

    @staticmethod
    def user_detail(user: User) -> dict:
        data = user.to_dict()
        data["wallet"] = user.wallet.to_dict() if user.wallet else None
        data["vendor"] = user.vendor.to_dict() if user.vendor else None
        data["client"] = (
            {
                "id": user.client.id,
                "address": user.client.address,
                "image": user.client.image.to_dict() if user.client.image else None,
            }
            if user.client else None
        )
        data["paymentMethods"] = [pm.to_dict() for pm in user.payment_methods]
        return data

    @staticmethod
    def update_user(user_id: int, **kwargs) -> User:
        user = UserService.get_user(user_id)

        email = kwargs.get("email")
        if email and email != user.email and User.query.filter_by(email=email).first():
            raise ConflictError("Email already exists")
        phone = kwargs.get("phone_number")
        if phone and phone != user.phone_number and User.query.filter_by(phone_number=phone).first():
            raise ConflictError("Phone number already exists")

        if "type" in kwargs:
            kwargs["type"] = UserType(kwargs["type"])

        user.update(**{key: value for key, value in kwargs.items() if key in UPDATABLE_FIELDS})
        return user

    @staticmethod
    def delete_user(user_id: int, current_user: User) -> User:
        """Soft delete user"""
        user = UserService.get_user(user_id)
        if user.id == current_user.id:
            raise ValueError("Cannot delete your own account")
        user.is_active = False
        user.soft_delete()
        logger.info("User %s soft deleted by %s", user.id, current_user.id)
        return user

    @staticmethod
    def create_by_admin(user_type: UserType, phone_number: str, **kwargs) -> tuple[User, str]:
        """Create a user on someone's behalf.

        Returns the user and the password that was set; a random one is
        generated when none was supplied.
        """
        password = kwargs.pop("password", None) or secrets.token_urlsafe(9)
        vendor_id = kwargs.pop("vendor_id", None)
        role = kwargs.pop("role", None)

        if user_type == UserType.EMPLOYEE:
            vendor = db.session.get(Vendor, vendor_id) if vendor_id else None
            if not vendor or not vendor.status:
                raise NotFoundError("Vendor not found")

        user = AuthService.register_user(
            phone_number=phone_number,
            password=password,
            user_type=user_type,
            is_verified=True,
            commit=False,
            **kwargs,
        )
        if user_type == UserType.EMPLOYEE:
            db.session.add(Employee(user_id=user.id, vendor_id=vendor_id, role=role))
        db.session.commit()
        return user, password

    @staticmethod
    def list_employees(page: int = 1, per_page: int = 20):
        return Employee.query.order_by(Employee.created_at.desc(), Employee.id.desc()).paginate(
            page=page, per_page=per_page, error_out=False
        )

    # Payment methods

    @staticmethod
    def add_payment_method(user_id: int, **data) -> PaymentMethod:
        UserService.get_user(user_id)
        payment_method = PaymentMethod(user_id=user_id, **data)
        db.session.add(payment_method)
        db.session.commit()
        return payment_method

    @staticmethod
    def _user_payment_method(user_id: int, pm_id: int) -> PaymentMethod:
        payment_method = PaymentMethod.query.filter_by(id=pm_id, user_id=user_id).first()
        if not payment_method:
            raise NotFoundError("Payment method not found for this user")
        return payment_method

    @staticmethod
    def update_payment_method(user_id: int, pm_id: int, **data) -> PaymentMethod:
        payment_method = UserService._user_payment_method(user_id, pm_id)
        payment_method.update(**data)
        return payment_method

    @staticmethod
    def delete_payment_method(user_id: int, pm_id: int) -> None:
        UserService._user_payment_method(user_id, pm_id).delete()

    # Notes

    @staticmethod
    def list_notes(user_id: int) -> list:
        UserService.get_user(user_id)
        return UserNote.query.filter_by(user_id=user_id).order_by(
            UserNote.created_at.desc(), UserNote.id.desc()
        ).all()

    @staticmethod
    def create_note(user_id: int, title: str, description: str) -> UserNote:
        UserService.get_user(user_id)
        return UserNote(user_id=user_id, title=title, description=description).save()

    @staticmethod
    def delete_note(user_id: int, note_id: int) -> None:
        note = UserNote.query.filter_by(id=note_id, user_id=user_id).first()
        if not note:
            raise NotFoundError("Note not found")
        note.delete()

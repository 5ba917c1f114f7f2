import logging

from flask_jwt_extended import create_access_token, create_refresh_token

from marketplace.models.user import User, Client
from marketplace.models.wallet import Wallet
from marketplace.extensions import db
from marketplace.enums import UserType
from marketplace.services.storage_service import StorageService
from marketplace.utils.exceptions import NotFoundError, ConflictError

logger = logging.getLogger(__name__)

# User types that hold money in the marketplace
WALLET_USER_TYPES = (UserType.CLIENT, UserType.VENDOR_OWNER)


class AuthService:

    @staticmethod
    def register_user(phone_number: str, password: str, user_type: UserType, **kwargs) -> User:
        email = kwargs.get("email")
        # Check if user exists
        if email and User.query.filter_by(email=email).first():
            raise ConflictError("Email already exists")
        if User.query.filter_by(phone_number=phone_number).first():
            raise ConflictError("Phone number already exists")

        picture = kwargs.get("picture")
        if picture and picture.filename:
            StorageService.validate_files([picture])

        try:
            user = User(
                name=kwargs.get("name"),
                email=email,
                phone_number=phone_number,
                type=user_type,
                is_verified=kwargs.get("is_verified", False),
            )
            user.set_password(password)

            db.session.add(user)
            db.session.flush()

            if user_type == UserType.CLIENT:
                client = Client(user_id=user.id, address=kwargs.get("address"))
                if picture and picture.filename:
                    client.image = StorageService.create_image(picture, f"client-{user.id}")
                db.session.add(client)

            if user_type in WALLET_USER_TYPES:
                db.session.add(Wallet(user_id=user.id))

            if kwargs.get("commit", True):
                db.session.commit()
            else:
                db.session.flush()
        except Exception:
            db.session.rollback()
            raise

        logger.info("Registered %s user %s", user_type.value, user.id)
        return user

    @staticmethod
    def login_user(password: str, email: str = None, phone_number: str = None) -> dict:
        """Authenticate user and generate tokens"""
        query = User.query
        user = (
            query.filter_by(email=email).first()
            if email
            else query.filter_by(phone_number=phone_number).first()
        )

        if not user or not user.check_password(password):
            raise ValueError("Invalid credentials")

        if not user.is_active or user.is_deleted:
            raise ValueError("Account is deactivated")

        access_token = create_access_token(identity=str(user.id))
        refresh_token = create_refresh_token(identity=str(user.id))

        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "user": user.to_dict(),
        }

    @staticmethod
    def get_user_by_id(user_id: int) -> User:
        user = db.session.get(User, user_id) if user_id else None
        if not user or user.is_deleted:
            raise NotFoundError("User not found")
        return user

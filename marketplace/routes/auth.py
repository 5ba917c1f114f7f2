from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity, create_access_token

from marketplace.enums import UserType
from marketplace.services.auth_service import AuthService
from marketplace.schemas import RegisterSchema, LoginSchema
from marketplace.utils.error_handlers import error_response
from marketplace.utils.validators import validate_form, validate_schema, parse_id

auth_bp = Blueprint("auth", __name__)


def _register(user_type: UserType, **extra):
    try:
        data = request.validated_data
        user = AuthService.register_user(user_type=user_type, **data, **extra)
        return (
            jsonify(
                {"message": "User registered successfully", "user": user.to_dict()}
            ),
            201,
        )
    except ValueError as e:
        return error_response(e)


@auth_bp.route("/register-client", methods=["POST"])
@validate_form(RegisterSchema)
def register_client():
    """Register a client; an optional ``picture`` upload becomes the profile image"""
    return _register(UserType.CLIENT, picture=request.files.get("picture"))


@auth_bp.route("/register-vendor-owner", methods=["POST"])
@validate_schema(RegisterSchema)
def register_vendor_owner():
    return _register(UserType.VENDOR_OWNER)


@auth_bp.route("/register-admin", methods=["POST"])
@validate_schema(RegisterSchema)
def register_admin():
    return _register(UserType.ADMIN)


@auth_bp.route("/login", methods=["POST"])
@validate_schema(LoginSchema)
def login():
    """User login"""
    try:
        data = request.validated_data
        result = AuthService.login_user(**data)
        return jsonify(result), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 401


@auth_bp.route("/refresh", methods=["POST"])
@jwt_required(refresh=True)
def refresh():
    """Refresh access token"""
    user_id = get_jwt_identity()
    access_token = create_access_token(identity=user_id)
    return jsonify({"access_token": access_token}), 200


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def get_me():
    """Get current user info"""
    try:
        user = AuthService.get_user_by_id(parse_id(get_jwt_identity()))
        return jsonify({"user": user.to_dict()}), 200
    except ValueError as e:
        return error_response(e)

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from marketplace.enums import UserType
from marketplace.schemas import AdminUserCreateSchema, EmployeeCreateSchema
from marketplace.services.user_service import UserService
from marketplace.utils.decorators import role_required
from marketplace.utils.error_handlers import error_response
from marketplace.utils.validators import validate_schema

user_admin_bp = Blueprint("users_admin", __name__)


def _create(user_type: UserType):
    try:
        data = dict(request.validated_data)
        password_given = bool(data.get("password"))
        user, password = UserService.create_by_admin(user_type, **data)
    except ValueError as e:
        return error_response(e)

    body = {"message": "User created successfully", "user": user.to_dict()}
    if user_type == UserType.EMPLOYEE:
        body["employee"] = user.employee.to_dict()
    if not password_given:
        body["temporary_password"] = password
    return jsonify(body), 201


@user_admin_bp.route("/clients", methods=["POST"])
@jwt_required()
@role_required(UserType.ADMIN)
@validate_schema(AdminUserCreateSchema)
def create_client(current_user):
    return _create(UserType.CLIENT)


@user_admin_bp.route("/employees", methods=["POST"])
@jwt_required()
@role_required(UserType.ADMIN)
@validate_schema(EmployeeCreateSchema)
def create_employee(current_user):
    """Create an employee attached to an active vendor"""
    return _create(UserType.EMPLOYEE)


@user_admin_bp.route("/vendor-owners", methods=["POST"])
@jwt_required()
@role_required(UserType.ADMIN)
@validate_schema(AdminUserCreateSchema)
def create_vendor_owner(current_user):
    return _create(UserType.VENDOR_OWNER)

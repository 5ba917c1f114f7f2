from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from marketplace.enums import UserType, values
from marketplace.schemas import (
    UserUpdateSchema, NoteSchema, PaymentMethodSchema, PaymentMethodUpdateSchema,
)
from marketplace.services.user_service import UserService
from marketplace.utils.decorators import role_required
from marketplace.utils.error_handlers import error_response
from marketplace.utils.validators import validate_schema, validate_pagination, pagination_meta, path_id

user_bp = Blueprint("users", __name__)


@user_bp.route("/", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def get_users(current_user):
    """Get all users"""
    user_type = request.args.get("type")
    if user_type and user_type not in values(UserType):
        return jsonify({"error": "Invalid user type"}), 400

    page, limit = validate_pagination()
    pagination = UserService.list_users(
        user_type=user_type,
        search=request.args.get("search"),
        page=page,
        per_page=limit,
    )
    return jsonify({
        "users": [u.to_dict() for u in pagination.items],
        "pagination": pagination_meta(pagination.total, page, limit),
    }), 200


@user_bp.route("/<user_id>", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
def get_user(user_id, current_user):
    """Get user details"""
    try:
        user = UserService.get_user(user_id)
        return jsonify({"user": UserService.user_detail(user)}), 200
    except ValueError as e:
        return error_response(e)


@user_bp.route("/<user_id>", methods=["PUT"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
@validate_schema(UserUpdateSchema)
def update_user(user_id, current_user):
    try:
        user = UserService.update_user(user_id, **request.validated_data)
        return jsonify({"message": "User updated successfully", "user": user.to_dict()}), 200
    except ValueError as e:
        return error_response(e)


@user_bp.route("/<user_id>", methods=["DELETE"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
def delete_user(user_id, current_user):
    try:
        UserService.delete_user(user_id, current_user)
        return jsonify({"message": "User deleted successfully"}), 200
    except ValueError as e:
        return error_response(e)


# Payment methods

@user_bp.route("/<user_id>/payment-methods", methods=["POST"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
@validate_schema(PaymentMethodSchema)
def add_payment_method(user_id, current_user):
    try:
        payment_method = UserService.add_payment_method(user_id, **request.validated_data)
        return jsonify({
            "message": "Payment method added successfully",
            "paymentMethod": payment_method.to_dict(),
        }), 201
    except ValueError as e:
        return error_response(e)


@user_bp.route("/<user_id>/payment-methods/<pm_id>", methods=["PUT"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
@path_id("pm_id", "payment method")
@validate_schema(PaymentMethodUpdateSchema)
def update_payment_method(user_id, pm_id, current_user):
    try:
        payment_method = UserService.update_payment_method(user_id, pm_id, **request.validated_data)
        return jsonify({
            "message": "Payment method updated successfully",
            "paymentMethod": payment_method.to_dict(),
        }), 200
    except ValueError as e:
        return error_response(e)


@user_bp.route("/<user_id>/payment-methods/<pm_id>", methods=["DELETE"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
@path_id("pm_id", "payment method")
def delete_payment_method(user_id, pm_id, current_user):
    try:
        UserService.delete_payment_method(user_id, pm_id)
        return jsonify({"message": "Payment method deleted successfully"}), 200
    except ValueError as e:
        return error_response(e)


# Notes

@user_bp.route("/<user_id>/notes", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
def get_notes(user_id, current_user):
    try:
        notes = UserService.list_notes(user_id)
        return jsonify({"notes": [n.to_dict() for n in notes]}), 200
    except ValueError as e:
        return error_response(e)


@user_bp.route("/<user_id>/notes", methods=["POST"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
@validate_schema(NoteSchema)
def create_note(user_id, current_user):
    try:
        note = UserService.create_note(user_id, **request.validated_data)
        return jsonify({"message": "Note created successfully", "note": note.to_dict()}), 201
    except ValueError as e:
        return error_response(e)


@user_bp.route("/<user_id>/notes/<note_id>", methods=["DELETE"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
@path_id("note_id", "note")
def delete_note(user_id, note_id, current_user):
    try:
        UserService.delete_note(user_id, note_id)
        return jsonify({"message": "Note deleted successfully"}), 200
    except ValueError as e:
        return error_response(e)

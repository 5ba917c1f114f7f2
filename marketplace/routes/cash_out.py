from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from marketplace.enums import UserType
from marketplace.schemas import CashOutCreateSchema, CashOutRejectSchema, CASH_OUT_STATUSES
from marketplace.services.cash_out_service import CashOutService
from marketplace.utils.decorators import role_required
from marketplace.utils.error_handlers import error_response
from marketplace.utils.exceptions import PermissionDeniedError
from marketplace.utils.validators import validate_schema, validate_pagination, pagination_meta, path_id

cash_out_bp = Blueprint("cash_out", __name__)

ALL_USER_TYPES = tuple(UserType)


def _ensure_owner_or_admin(current_user, user_id):
    if current_user.type != UserType.ADMIN and current_user.id != user_id:
        raise PermissionDeniedError("You can only access your own cash-out requests")


@cash_out_bp.route("/<user_id>", methods=["POST"])
@jwt_required()
@role_required(*ALL_USER_TYPES)
@path_id("user_id", "user")
@validate_schema(CashOutCreateSchema)
def create_request(user_id, current_user):
    """Request a withdrawal from the user's wallet"""
    try:
        _ensure_owner_or_admin(current_user, user_id)
        data = request.validated_data
        cash_out = CashOutService.create_request(user_id, data["amount"], data.get("reason"))
        return jsonify({
            "message": "Cash-out request created successfully",
            "cashOutRequest": cash_out.to_dict(),
        }), 201
    except ValueError as e:
        return error_response(e)


@cash_out_bp.route("/", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def get_requests(current_user):
    status = request.args.get("status")
    if status and status not in CASH_OUT_STATUSES:
        return jsonify({"error": f"Invalid status. Must be one of: {', '.join(CASH_OUT_STATUSES)}"}), 400

    page, limit = validate_pagination()
    pagination = CashOutService.list_requests(status=status, page=page, per_page=limit)
    return jsonify({
        "cashOutRequests": [r.to_dict() for r in pagination.items],
        "pagination": pagination_meta(pagination.total, page, limit),
    }), 200


@cash_out_bp.route("/user/<user_id>", methods=["GET"])
@jwt_required()
@role_required(*ALL_USER_TYPES)
@path_id("user_id", "user")
def get_user_requests(user_id, current_user):
    page, limit = validate_pagination()
    try:
        _ensure_owner_or_admin(current_user, user_id)
        pagination = CashOutService.list_user_requests(user_id, page=page, per_page=limit)
        return jsonify({
            "cashOutRequests": [r.to_dict() for r in pagination.items],
            "pagination": pagination_meta(pagination.total, page, limit),
        }), 200
    except ValueError as e:
        return error_response(e)


@cash_out_bp.route("/<request_id>", methods=["GET"])
@jwt_required()
@role_required(*ALL_USER_TYPES)
@path_id("request_id", "request")
def get_request(request_id, current_user):
    try:
        cash_out = CashOutService.get_request(request_id)
        _ensure_owner_or_admin(current_user, cash_out.user_id)
        return jsonify({"cashOutRequest": cash_out.to_dict()}), 200
    except ValueError as e:
        return error_response(e)


@cash_out_bp.route("/<request_id>/approve", methods=["PATCH"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("request_id", "request")
def approve_request(request_id, current_user):
    """Approve and debit the wallet"""
    try:
        cash_out = CashOutService.approve(request_id)
        return jsonify({
            "message": "Cash-out request approved",
            "cashOutRequest": cash_out.to_dict(),
        }), 200
    except ValueError as e:
        return error_response(e)


@cash_out_bp.route("/<request_id>/reject", methods=["PATCH"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("request_id", "request")
@validate_schema(CashOutRejectSchema)
def reject_request(request_id, current_user):
    try:
        cash_out = CashOutService.reject(request_id, request.validated_data.get("reason"))
        return jsonify({
            "message": "Cash-out request rejected",
            "cashOutRequest": cash_out.to_dict(),
        }), 200
    except ValueError as e:
        return error_response(e)

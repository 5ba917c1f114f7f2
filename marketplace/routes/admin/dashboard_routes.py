from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from marketplace.enums import UserType, TransactionType, values
from marketplace.services.dashboard_service import DashboardService
from marketplace.services.order_service import OrderService
from marketplace.services.user_service import UserService
from marketplace.services.wallet_service import WalletService
from marketplace.utils.decorators import role_required
from marketplace.utils.validators import validate_pagination, pagination_meta

dashboard_admin_bp = Blueprint("dashboard_admin", __name__)


@dashboard_admin_bp.route("/dashboard/stats", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def get_dashboard_stats(current_user):
    """Get admin dashboard statistics"""
    return jsonify(DashboardService.get_stats()), 200


@dashboard_admin_bp.route("/dashboard/recent-orders", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def get_recent_orders(current_user):
    orders = OrderService.recent_orders(10)
    return jsonify({"orders": [o.to_dict() for o in orders]}), 200


@dashboard_admin_bp.route("/transactions", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def get_transactions(current_user):
    type_ = request.args.get("type")
    if type_ and type_ not in values(TransactionType):
        return jsonify({"error": "Invalid transaction type"}), 400

    page, limit = validate_pagination()
    pagination = WalletService.list_transactions(type_=type_, page=page, per_page=limit)
    transactions = []
    for t in pagination.items:
        data = t.to_dict()
        data["user"] = t.wallet.user.to_summary() if t.wallet and t.wallet.user else None
        transactions.append(data)
    return jsonify({
        "transactions": transactions,
        "pagination": pagination_meta(pagination.total, page, limit),
    }), 200


@dashboard_admin_bp.route("/employees", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def get_employees(current_user):
    page, limit = validate_pagination()
    pagination = UserService.list_employees(page=page, per_page=limit)
    return jsonify({
        "employees": [e.to_dict() for e in pagination.items],
        "pagination": pagination_meta(pagination.total, page, limit),
    }), 200

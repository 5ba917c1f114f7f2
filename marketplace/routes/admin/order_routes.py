from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from marketplace.enums import UserType, OrderStatus, DeliveryStatus, values
from marketplace.schemas import OrderStatusSchema
from marketplace.services.order_service import OrderService
from marketplace.services.report_service import ReportService, ORDER_HEADERS
from marketplace.utils.decorators import role_required
from marketplace.utils.error_handlers import error_response
from marketplace.utils.helpers import attachment, dated_filename
from marketplace.utils.validators import validate_schema, validate_pagination, pagination_meta, path_id

order_admin_bp = Blueprint("orders_admin", __name__)


def _order_filters():
    """Read order filters from the query string; raises ValueError on a bad status"""
    status = request.args.get("status")
    if status and status not in values(OrderStatus):
        raise ValueError("Invalid status")
    return {
        "status": status,
        "vendor_id": request.args.get("vendor_id", type=int),
        "client_id": request.args.get("client_id", type=int),
        "search": request.args.get("search"),
    }


@order_admin_bp.route("/orders", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def get_orders(current_user):
    """Get all orders"""
    try:
        filters = _order_filters()
    except ValueError as e:
        return error_response(e)

    page, limit = validate_pagination()
    pagination = OrderService.get_orders(page=page, per_page=limit, **filters)
    return jsonify({
        "orders": [o.to_dict() for o in pagination.items],
        "pagination": pagination_meta(pagination.total, page, limit),
    }), 200


@order_admin_bp.route("/orders/export/csv", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def export_orders_csv(current_user):
    try:
        rows = ReportService.order_rows(OrderService.all_orders(**_order_filters()))
    except ValueError as e:
        return error_response(e)
    return attachment(ReportService.csv(ORDER_HEADERS, rows), "text/csv", dated_filename("orders", "csv"))


@order_admin_bp.route("/orders/export/pdf", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def export_orders_pdf(current_user):
    try:
        rows = ReportService.order_rows(OrderService.all_orders(**_order_filters()))
    except ValueError as e:
        return error_response(e)
    return attachment(
        ReportService.pdf("Orders report", ORDER_HEADERS, rows),
        "application/pdf",
        dated_filename("orders", "pdf"),
    )


@order_admin_bp.route("/orders/vendor/<vendor_id>", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("vendor_id", "vendor")
def get_vendor_orders(vendor_id, current_user):
    page, limit = validate_pagination()
    try:
        pagination = OrderService.get_vendor_orders(vendor_id, page=page, per_page=limit)
    except ValueError as e:
        return error_response(e)
    return jsonify({
        "orders": [o.to_dict() for o in pagination.items],
        "pagination": pagination_meta(pagination.total, page, limit),
    }), 200


@order_admin_bp.route("/orders/<order_id>", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("order_id", "order")
def get_order(order_id, current_user):
    try:
        order = OrderService.get_order_by_id(order_id)
        return jsonify({"order": order.to_dict()}), 200
    except ValueError as e:
        return error_response(e)


@order_admin_bp.route("/orders/<order_id>/status", methods=["PATCH"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("order_id", "order")
@validate_schema(OrderStatusSchema)
def update_order_status(order_id, current_user):
    try:
        order = OrderService.update_order_status(order_id, request.validated_data["status"])
        return jsonify({"message": "Order status updated successfully", "order": order.to_dict()}), 200
    except ValueError as e:
        return error_response(e)


@order_admin_bp.route("/deliveries", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def get_deliveries(current_user):
    status = request.args.get("status")
    if status and status not in values(DeliveryStatus):
        return jsonify({"error": "Invalid status"}), 400

    page, limit = validate_pagination()
    pagination = OrderService.get_deliveries(status=status, page=page, per_page=limit)
    return jsonify({
        "deliveries": [d.to_dict() for d in pagination.items],
        "pagination": pagination_meta(pagination.total, page, limit),
    }), 200

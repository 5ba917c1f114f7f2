from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from marketplace.enums import UserType, VendorType, values
from marketplace.schemas import VendorApprovalSchema, PaymentMethodSchema, NoteSchema
from marketplace.services.report_service import ReportService, VENDOR_HEADERS
from marketplace.services.vendor_service import VendorService
from marketplace.utils.decorators import role_required
from marketplace.utils.error_handlers import error_response
from marketplace.utils.helpers import attachment, dated_filename
from marketplace.utils.validators import (
    validate_schema, validate_pagination, pagination_meta, parse_bool_arg, path_id,
)

vendor_admin_bp = Blueprint("vendors_admin", __name__)


@vendor_admin_bp.route("/", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def get_vendors(current_user):
    vendor_type = request.args.get("type")
    if vendor_type and vendor_type not in values(VendorType):
        return jsonify({"error": "Invalid vendor type"}), 400

    page, limit = validate_pagination()
    pagination = VendorService.search_vendors(
        search=request.args.get("search"),
        is_approved=parse_bool_arg("is_approved"),
        vendor_type=vendor_type,
        page=page,
        per_page=limit,
    )
    return jsonify({
        "vendors": [v.to_dict(include_wallet=True) for v in pagination.items],
        "pagination": pagination_meta(pagination.total, page, limit),
    }), 200


@vendor_admin_bp.route("/deleted", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def get_deleted_vendors(current_user):
    """Recycle bin"""
    page, limit = validate_pagination()
    pagination = VendorService.list_deleted(page=page, per_page=limit)
    return jsonify({
        "vendors": [v.to_dict() for v in pagination.items],
        "pagination": pagination_meta(pagination.total, page, limit),
    }), 200


@vendor_admin_bp.route("/export/csv", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def export_vendors(current_user):
    return attachment(
        ReportService.csv(VENDOR_HEADERS, VendorService.report_rows()),
        "text/csv",
        dated_filename("vendors", "csv"),
    )


@vendor_admin_bp.route("/approval", methods=["PATCH"])
@jwt_required()
@role_required(UserType.ADMIN)
@validate_schema(VendorApprovalSchema)
def update_approval(current_user):
    try:
        data = request.validated_data
        vendor = VendorService.set_approval(data["vendor_id"], data["isApproved"])
        return jsonify({
            "message": "Vendor approved" if vendor.is_approved else "Vendor approval revoked",
            "vendor": vendor.to_dict(),
        }), 200
    except ValueError as e:
        return error_response(e)


@vendor_admin_bp.route("/<vendor_id>", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("vendor_id", "vendor")
def get_vendor(vendor_id, current_user):
    try:
        vendor = VendorService.get_vendor(vendor_id)
        return jsonify({"vendor": vendor.to_dict(include_wallet=True)}), 200
    except ValueError as e:
        return error_response(e)


@vendor_admin_bp.route("/<vendor_id>", methods=["DELETE"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("vendor_id", "vendor")
def delete_vendor(vendor_id, current_user):
    try:
        VendorService.soft_delete(vendor_id)
        return jsonify({"message": "Vendor moved to recycle bin"}), 200
    except ValueError as e:
        return error_response(e)


@vendor_admin_bp.route("/<vendor_id>/restore", methods=["PATCH"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("vendor_id", "vendor")
def restore_vendor(vendor_id, current_user):
    try:
        vendor = VendorService.restore(vendor_id)
        return jsonify({"message": "Vendor restored successfully", "vendor": vendor.to_dict()}), 200
    except ValueError as e:
        return error_response(e)


@vendor_admin_bp.route("/<vendor_id>/permanent", methods=["DELETE"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("vendor_id", "vendor")
def permanently_delete_vendor(vendor_id, current_user):
    try:
        VendorService.permanent_delete(vendor_id)
        return jsonify({"message": "Vendor permanently deleted"}), 200
    except ValueError as e:
        return error_response(e)


# Payment methods

@vendor_admin_bp.route("/<vendor_id>/payment-methods", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("vendor_id", "vendor")
def get_payment_methods(vendor_id, current_user):
    try:
        payment_methods = VendorService.list_payment_methods(vendor_id)
        return jsonify({"paymentMethods": [pm.to_dict() for pm in payment_methods]}), 200
    except ValueError as e:
        return error_response(e)


@vendor_admin_bp.route("/<vendor_id>/payment-methods", methods=["POST"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("vendor_id", "vendor")
@validate_schema(PaymentMethodSchema)
def add_payment_method(vendor_id, current_user):
    try:
        payment_method = VendorService.add_payment_method(vendor_id, **request.validated_data)
        return jsonify({
            "message": "Payment method added successfully",
            "paymentMethod": payment_method.to_dict(),
        }), 201
    except ValueError as e:
        return error_response(e)


@vendor_admin_bp.route("/<vendor_id>/payment-methods/<pm_id>", methods=["DELETE"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("vendor_id", "vendor")
@path_id("pm_id", "payment method")
def delete_payment_method(vendor_id, pm_id, current_user):
    try:
        VendorService.delete_payment_method(vendor_id, pm_id)
        return jsonify({"message": "Payment method deleted successfully"}), 200
    except ValueError as e:
        return error_response(e)


# Notes

@vendor_admin_bp.route("/<vendor_id>/notes", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("vendor_id", "vendor")
def get_notes(vendor_id, current_user):
    try:
        notes = VendorService.list_notes(vendor_id)
        return jsonify({"notes": [n.to_dict() for n in notes]}), 200
    except ValueError as e:
        return error_response(e)


@vendor_admin_bp.route("/<vendor_id>/notes", methods=["POST"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("vendor_id", "vendor")
@validate_schema(NoteSchema)
def create_note(vendor_id, current_user):
    try:
        note = VendorService.create_note(vendor_id, **request.validated_data)
        return jsonify({"message": "Note created successfully", "note": note.to_dict()}), 201
    except ValueError as e:
        return error_response(e)


@vendor_admin_bp.route("/<vendor_id>/notes/<note_id>", methods=["DELETE"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("vendor_id", "vendor")
@path_id("note_id", "note")
def delete_note(vendor_id, note_id, current_user):
    try:
        VendorService.delete_note(vendor_id, note_id)
        return jsonify({"message": "Note deleted successfully"}), 200
    except ValueError as e:
        return error_response(e)

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from marketplace.enums import UserType, VendorType
from marketplace.schemas import VendorCreateSchema, VendorStatusSchema
from marketplace.services.vendor_service import VendorService, DOCUMENT_FIELDS
from marketplace.utils.decorators import role_required
from marketplace.utils.error_handlers import error_response
from marketplace.utils.validators import validate_form, validate_schema, require_files

vendor_bp = Blueprint("vendors", __name__)

VENDOR_JSON_FIELDS = ("category_ids", "payment_method")


def _create(vendor_type: VendorType, current_user):
    files = {
        field: request.files.get(field)
        for field in ("cover_image", DOCUMENT_FIELDS[vendor_type])
    }
    try:
        vendor, created = VendorService.create_vendor(
            current_user, vendor_type, request.validated_data, files
        )
    except ValueError as e:
        return error_response(e)

    if created:
        return jsonify({
            "message": "Vendor created successfully",
            "vendor": vendor.to_dict(include_wallet=True),
        }), 201
    return jsonify({
        "message": "Vendor restored successfully",
        "vendor": vendor.to_dict(include_wallet=True),
    }), 200


@vendor_bp.route("/individual", methods=["POST"])
@jwt_required()
@role_required(UserType.VENDOR_OWNER, UserType.EMPLOYEE)
@require_files("cover_image", "fayda_image")
@validate_form(VendorCreateSchema, json_fields=VENDOR_JSON_FIELDS)
def create_individual_vendor(current_user):
    return _create(VendorType.INDIVIDUAL, current_user)


@vendor_bp.route("/business", methods=["POST"])
@jwt_required()
@role_required(UserType.VENDOR_OWNER, UserType.EMPLOYEE)
@require_files("cover_image", "business_license_image")
@validate_form(VendorCreateSchema, json_fields=VENDOR_JSON_FIELDS)
def create_business_vendor(current_user):
    return _create(VendorType.BUSINESS, current_user)


@vendor_bp.route("/", methods=["GET"])
@jwt_required()
def get_vendors():
    """Active vendors"""
    vendors = VendorService.list_active_vendors()
    return jsonify({"vendors": [v.to_dict() for v in vendors]}), 200


@vendor_bp.route("/me/status", methods=["GET"])
@jwt_required()
@role_required(UserType.VENDOR_OWNER, UserType.EMPLOYEE)
def get_my_status(current_user):
    try:
        vendor = VendorService.get_own_vendor(current_user)
        return jsonify({
            "vendor_id": vendor.id,
            "status": vendor.status,
            "isApproved": vendor.is_approved is True,
        }), 200
    except ValueError as e:
        return error_response(e)


@vendor_bp.route("/me/status", methods=["PATCH"])
@jwt_required()
@role_required(UserType.VENDOR_OWNER, UserType.EMPLOYEE)
@validate_schema(VendorStatusSchema)
def update_my_status(current_user):
    try:
        vendor = VendorService.get_own_vendor(current_user)
        VendorService.set_status(vendor, request.validated_data["status"])
        return jsonify({"message": "Vendor status updated", "vendor": vendor.to_dict()}), 200
    except ValueError as e:
        return error_response(e)


@vendor_bp.route("/me", methods=["DELETE"])
@jwt_required()
@role_required(UserType.VENDOR_OWNER, UserType.EMPLOYEE)
def delete_my_vendor(current_user):
    try:
        vendor = VendorService.get_own_vendor(current_user)
        if not vendor.status:
            return jsonify({"error": "Vendor already deleted"}), 400
        VendorService.set_status(vendor, False)
        return jsonify({"message": "Vendor deleted successfully"}), 200
    except ValueError as e:
        return error_response(e)

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from marketplace.enums import UserType
from marketplace.schemas import ProductCreateSchema, ProductUpdateSchema
from marketplace.services.product_service import ProductService
from marketplace.services.report_service import ReportService, PRODUCT_HEADERS
from marketplace.utils.decorators import role_required
from marketplace.utils.error_handlers import error_response
from marketplace.utils.helpers import attachment, dated_filename
from marketplace.utils.validators import (
    validate_form, validate_pagination, pagination_meta, path_id,
)

product_bp = Blueprint("products", __name__)

PRODUCT_JSON_FIELDS = ("specs", "keepImages")


def _filters():
    return {
        "search": request.args.get("search"),
        "category_id": request.args.get("category_id", type=int),
        "subcategory_id": request.args.get("subcategory_id", type=int),
        "vendor_id": request.args.get("vendor_id", type=int),
    }


@product_bp.route("/", methods=["POST"])
@jwt_required()
@role_required(UserType.ADMIN, UserType.VENDOR_OWNER, UserType.EMPLOYEE)
@validate_form(ProductCreateSchema, json_fields=PRODUCT_JSON_FIELDS)
def create_product(current_user):
    try:
        product = ProductService.create_product(request.validated_data, request.files.getlist("images"))
        return jsonify({"message": "Product created successfully", "product": product.to_dict()}), 201
    except ValueError as e:
        return error_response(e)


@product_bp.route("/", methods=["GET"])
@jwt_required()
def get_products():
    """Products with optional category, subcategory, vendor and text filters"""
    page, limit = validate_pagination()
    pagination = ProductService.search_products(page=page, per_page=limit, **_filters())
    return jsonify({
        "products": [p.to_dict() for p in pagination.items],
        "pagination": pagination_meta(pagination.total, page, limit),
    }), 200


@product_bp.route("/export/csv", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def export_products(current_user):
    rows = ProductService.report_rows(**_filters())
    return attachment(
        ReportService.csv(PRODUCT_HEADERS, rows), "text/csv", dated_filename("products", "csv")
    )


@product_bp.route("/<product_id>", methods=["GET"])
@jwt_required()
@path_id("product_id", "product")
def get_product(product_id):
    try:
        product = ProductService.get_product_by_id(product_id)
        return jsonify({"product": product.to_dict()}), 200
    except ValueError as e:
        return error_response(e)


@product_bp.route("/<product_id>", methods=["PUT"])
@jwt_required()
@role_required(UserType.ADMIN, UserType.VENDOR_OWNER, UserType.EMPLOYEE)
@path_id("product_id", "product")
@validate_form(ProductUpdateSchema, json_fields=PRODUCT_JSON_FIELDS)
def update_product(product_id, current_user):
    try:
        product = ProductService.update_product(
            product_id, request.validated_data, request.files.getlist("images")
        )
        return jsonify({"message": "Product updated successfully", "product": product.to_dict()}), 200
    except ValueError as e:
        return error_response(e)


@product_bp.route("/<product_id>", methods=["DELETE"])
@jwt_required()
@role_required(UserType.ADMIN, UserType.VENDOR_OWNER, UserType.EMPLOYEE)
@path_id("product_id", "product")
def delete_product(product_id, current_user):
    try:
        ProductService.delete_product(product_id)
        return jsonify({"message": "Product deleted successfully"}), 200
    except ValueError as e:
        return error_response(e)

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from marketplace.enums import UserType
from marketplace.schemas import CategorySchema, CategoryUpdateSchema
from marketplace.services.category_service import CategoryService
from marketplace.utils.decorators import role_required
from marketplace.utils.error_handlers import error_response
from marketplace.utils.validators import validate_form, require_files, path_id

category_bp = Blueprint("category", __name__)


@category_bp.route("/", methods=["POST"])
@jwt_required()
@role_required(UserType.ADMIN)
@require_files("category_pictures")
@validate_form(CategorySchema)
def create_category(current_user):
    try:
        data = request.validated_data
        category = CategoryService.create_category(
            data["name"],
            request.files.getlist("category_pictures"),
            description=data.get("description"),
        )
        return jsonify({"message": "Category created successfully", "category": category.to_dict()}), 201
    except ValueError as e:
        return error_response(e)


@category_bp.route("/", methods=["GET"])
@jwt_required()
def get_categories():
    categories = CategoryService.list_categories()
    return jsonify({"categories": [c.to_dict() for c in categories]}), 200


@category_bp.route("/<category_id>", methods=["GET"])
@jwt_required()
@path_id("category_id", "category")
def get_category(category_id):
    try:
        category = CategoryService.get_category(category_id)
        return jsonify({"category": category.to_dict()}), 200
    except ValueError as e:
        return error_response(e)


@category_bp.route("/<category_id>", methods=["PUT"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("category_id", "category")
@validate_form(CategoryUpdateSchema, json_fields=("keepImages",))
def update_category(category_id, current_user):
    """Update fields; images not listed in keepImages are removed"""
    try:
        data = dict(request.validated_data)
        keep_image_ids = data.pop("keepImages", None)
        category = CategoryService.update_category(
            category_id,
            files=request.files.getlist("category_pictures"),
            keep_image_ids=keep_image_ids,
            **data,
        )
        return jsonify({"message": "Category updated successfully", "category": category.to_dict()}), 200
    except ValueError as e:
        return error_response(e)


@category_bp.route("/<category_id>", methods=["DELETE"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("category_id", "category")
def delete_category(category_id, current_user):
    try:
        CategoryService.delete_category(category_id)
        return jsonify({"message": "Category and related images deleted successfully"}), 200
    except ValueError as e:
        return error_response(e)


@category_bp.route("/<category_id>/subcategories", methods=["GET"])
@jwt_required()
@path_id("category_id", "category")
def get_category_subcategories(category_id):
    try:
        subcategories = CategoryService.list_subcategories(category_id)
        return jsonify({"subcategories": [s.to_dict() for s in subcategories]}), 200
    except ValueError as e:
        return error_response(e)

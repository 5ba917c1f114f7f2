from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from marketplace.enums import UserType
from marketplace.schemas import SubcategorySchema, SubcategoryUpdateSchema
from marketplace.services.category_service import SubcategoryService
from marketplace.utils.decorators import role_required
from marketplace.utils.error_handlers import error_response
from marketplace.utils.validators import validate_form, require_files, path_id

subcategory_bp = Blueprint("subcategory", __name__)


@subcategory_bp.route("/", methods=["POST"])
@jwt_required()
@role_required(UserType.ADMIN)
@require_files("subcategory_pictures")
@validate_form(SubcategorySchema)
def create_subcategory(current_user):
    """Create a subcategory, reviving a soft-deleted one of the same name"""
    try:
        data = request.validated_data
        subcategory, restored = SubcategoryService.create_subcategory(
            data["name"], data["category_id"], request.files.getlist("subcategory_pictures")
        )
    except ValueError as e:
        return error_response(e)

    if restored:
        return jsonify({
            "message": "Subcategory restored successfully",
            "subcategory": subcategory.to_dict(include_category=True),
        }), 200
    return jsonify({
        "message": "Subcategory created successfully",
        "subcategory": subcategory.to_dict(include_category=True),
    }), 201


@subcategory_bp.route("/", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def get_subcategories(current_user):
    subcategories = SubcategoryService.list_subcategories()
    return jsonify({"subcategories": [s.to_dict(include_category=True) for s in subcategories]}), 200


@subcategory_bp.route("/deleted", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def get_deleted_subcategories(current_user):
    subcategories = SubcategoryService.list_subcategories(deleted=True)
    return jsonify({"subcategories": [s.to_dict(include_category=True) for s in subcategories]}), 200


@subcategory_bp.route("/<subcategory_id>", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("subcategory_id", "subcategory")
def get_subcategory(subcategory_id, current_user):
    try:
        subcategory = SubcategoryService.get_subcategory(subcategory_id)
        return jsonify({"subcategory": subcategory.to_dict(include_category=True)}), 200
    except ValueError as e:
        return error_response(e)


@subcategory_bp.route("/<subcategory_id>", methods=["PUT"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("subcategory_id", "subcategory")
@validate_form(SubcategoryUpdateSchema, json_fields=("keepImages",))
def update_subcategory(subcategory_id, current_user):
    try:
        data = dict(request.validated_data)
        keep_image_ids = data.pop("keepImages", None)
        subcategory = SubcategoryService.update_subcategory(
            subcategory_id,
            files=request.files.getlist("subcategory_pictures"),
            keep_image_ids=keep_image_ids,
            **data,
        )
        return jsonify({
            "message": "Subcategory updated successfully",
            "subcategory": subcategory.to_dict(include_category=True),
        }), 200
    except ValueError as e:
        return error_response(e)


@subcategory_bp.route("/<subcategory_id>", methods=["DELETE"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("subcategory_id", "subcategory")
def delete_subcategory(subcategory_id, current_user):
    try:
        SubcategoryService.soft_delete(subcategory_id)
        return jsonify({"message": "Subcategory moved to recycle bin"}), 200
    except ValueError as e:
        return error_response(e)


@subcategory_bp.route("/<subcategory_id>/restore", methods=["PATCH"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("subcategory_id", "subcategory")
def restore_subcategory(subcategory_id, current_user):
    try:
        subcategory = SubcategoryService.restore(subcategory_id)
        return jsonify({
            "message": "Subcategory restored successfully",
            "subcategory": subcategory.to_dict(include_category=True),
        }), 200
    except ValueError as e:
        return error_response(e)


@subcategory_bp.route("/<subcategory_id>/permanent", methods=["DELETE"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("subcategory_id", "subcategory")
def permanently_delete_subcategory(subcategory_id, current_user):
    try:
        SubcategoryService.permanent_delete(subcategory_id)
        return jsonify({"message": "Subcategory permanently deleted"}), 200
    except ValueError as e:
        return error_response(e)

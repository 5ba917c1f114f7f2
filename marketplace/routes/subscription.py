from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from marketplace.enums import UserType
from marketplace.schemas import SubscriptionSchema
from marketplace.services.subscription_service import SubscriptionService
from marketplace.utils.decorators import role_required
from marketplace.utils.error_handlers import error_response
from marketplace.utils.validators import validate_schema, path_id

subscription_bp = Blueprint("subscription", __name__)


@subscription_bp.route("/", methods=["POST"])
@jwt_required()
@role_required(UserType.ADMIN)
@validate_schema(SubscriptionSchema)
def create_subscription(current_user):
    subscription = SubscriptionService.create_subscription(**request.validated_data)
    return jsonify({
        "message": "Subscription created successfully",
        "subscription": subscription.to_dict(),
    }), 201


@subscription_bp.route("/", methods=["GET"])
@jwt_required()
def get_subscriptions():
    subscriptions = SubscriptionService.list_subscriptions()
    return jsonify({"subscriptions": [s.to_dict() for s in subscriptions]}), 200


@subscription_bp.route("/<subscription_id>", methods=["GET"])
@jwt_required()
@path_id("subscription_id", "subscription")
def get_subscription(subscription_id):
    try:
        subscription = SubscriptionService.get_subscription(subscription_id)
        return jsonify({"subscription": subscription.to_dict(include_vendors=True)}), 200
    except ValueError as e:
        return error_response(e)


@subscription_bp.route("/<subscription_id>/details", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("subscription_id", "subscription")
def get_subscription_details(subscription_id, current_user):
    """Subscription with its vendors and usage statistics"""
    try:
        subscription = SubscriptionService.get_subscription(subscription_id)
        data = subscription.to_dict(include_vendors=True)
        data["statistics"] = subscription.statistics()
        return jsonify({"subscription": data}), 200
    except ValueError as e:
        return error_response(e)


@subscription_bp.route("/<subscription_id>", methods=["PUT"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("subscription_id", "subscription")
@validate_schema(SubscriptionSchema)
def update_subscription(subscription_id, current_user):
    try:
        subscription = SubscriptionService.update_subscription(subscription_id, **request.validated_data)
        return jsonify({
            "message": "Subscription updated successfully",
            "subscription": subscription.to_dict(),
        }), 200
    except ValueError as e:
        return error_response(e)


@subscription_bp.route("/<subscription_id>", methods=["DELETE"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("subscription_id", "subscription")
def delete_subscription(subscription_id, current_user):
    try:
        SubscriptionService.delete_subscription(subscription_id)
        return jsonify({"message": "Subscription deleted successfully"}), 200
    except ValueError as e:
        return error_response(e)

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from marketplace.enums import UserType
from marketplace.schemas import WalletFundsSchema, WalletStatusSchema
from marketplace.services.auth_service import AuthService
from marketplace.services.report_service import ReportService, WALLET_HEADERS
from marketplace.services.wallet_service import WalletService
from marketplace.utils.decorators import role_required
from marketplace.utils.error_handlers import error_response
from marketplace.utils.helpers import attachment, dated_filename
from marketplace.utils.validators import validate_schema, validate_pagination, pagination_meta, path_id

wallet_bp = Blueprint("wallet", __name__)


def _wallet_list(owner=None):
    page, limit = validate_pagination()
    pagination = WalletService.list_wallets(owner=owner, page=page, per_page=limit)
    return jsonify({
        "wallets": [WalletService.wallet_summary(w) for w in pagination.items],
        "pagination": pagination_meta(pagination.total, page, limit),
    }), 200


@wallet_bp.route("/", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def get_all_wallets(current_user):
    """All wallets with owner and last transactions"""
    return _wallet_list()


@wallet_bp.route("/vendors", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def get_vendor_wallets(current_user):
    return _wallet_list("vendors")


@wallet_bp.route("/users", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def get_user_wallets(current_user):
    return _wallet_list("users")


@wallet_bp.route("/transaction/<transaction_id>", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
def get_transaction(transaction_id, current_user):
    try:
        transaction = WalletService.get_transaction(transaction_id)
        data = transaction.to_dict()
        owner = transaction.wallet.user
        data["user"] = owner.to_summary() if owner else None
        return jsonify({"transaction": data}), 200
    except ValueError as e:
        return error_response(e)


@wallet_bp.route("/<user_id>", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
def get_wallet(user_id, current_user):
    try:
        wallet = WalletService.get_wallet_by_user_id(user_id)
        data = wallet.to_dict(recent=10)
        data["user"] = wallet.user.to_summary()
        return jsonify({"wallet": data}), 200
    except ValueError as e:
        return error_response(e)


@wallet_bp.route("/<user_id>/balance", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
def get_balance(user_id, current_user):
    try:
        wallet = WalletService.get_wallet_by_user_id(user_id)
        return jsonify({"balance": float(wallet.balance), "wallet_id": wallet.id}), 200
    except ValueError as e:
        return error_response(e)


@wallet_bp.route("/<user_id>/transactions", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
def get_transactions(user_id, current_user):
    """Wallet transactions, newest first"""
    try:
        WalletService.get_wallet_by_user_id(user_id)
    except ValueError as e:
        return error_response(e)

    page, limit = validate_pagination()
    pagination = WalletService.get_transactions(user_id, page=page, per_page=limit)
    return jsonify({
        "transactions": [t.to_dict() for t in pagination.items],
        "pagination": pagination_meta(pagination.total, page, limit),
    }), 200


@wallet_bp.route("/<user_id>", methods=["POST"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
def create_wallet(user_id, current_user):
    try:
        wallet = WalletService.create_wallet(user_id)
        return jsonify({"message": "Wallet created successfully", "wallet": wallet.to_dict()}), 201
    except ValueError as e:
        return error_response(e)


@wallet_bp.route("/<user_id>/add-funds", methods=["POST"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
@validate_schema(WalletFundsSchema)
def add_funds(user_id, current_user):
    """Credit a wallet, creating it on first use"""
    try:
        AuthService.get_user_by_id(user_id)
        data = request.validated_data
        wallet, transaction = WalletService.add_funds(user_id, data["amount"], data.get("reason"))
        return jsonify({
            "message": "Funds added successfully",
            "wallet": wallet.to_dict(),
            "transaction": transaction.to_dict(),
        }), 200
    except ValueError as e:
        return error_response(e)


@wallet_bp.route("/<user_id>/deduct-funds", methods=["POST"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
@validate_schema(WalletFundsSchema)
def deduct_funds(user_id, current_user):
    try:
        data = request.validated_data
        wallet, transaction = WalletService.deduct_funds(user_id, data["amount"], data.get("reason"))
        return jsonify({
            "message": "Funds deducted successfully",
            "wallet": wallet.to_dict(),
            "transaction": transaction.to_dict(),
        }), 200
    except ValueError as e:
        return error_response(e)


@wallet_bp.route("/<user_id>/status", methods=["PATCH"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
@validate_schema(WalletStatusSchema)
def update_status(user_id, current_user):
    try:
        wallet = WalletService.set_status(user_id, request.validated_data["status"])
        return jsonify({"message": "Wallet status updated", "wallet": wallet.to_dict()}), 200
    except ValueError as e:
        return error_response(e)


def _statement(user_id):
    wallet = WalletService.get_wallet_by_user_id(user_id)
    return wallet, ReportService.wallet_rows(wallet, WalletService.get_all_transactions(user_id))


@wallet_bp.route("/<user_id>/export/csv", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
def export_csv(user_id, current_user):
    try:
        _, rows = _statement(user_id)
    except ValueError as e:
        return error_response(e)
    return attachment(
        ReportService.csv(WALLET_HEADERS, rows),
        "text/csv",
        dated_filename(f"wallet-{user_id}-transactions", "csv"),
    )


@wallet_bp.route("/<user_id>/export/pdf", methods=["GET"])
@jwt_required()
@role_required(UserType.ADMIN)
@path_id("user_id", "user")
def export_pdf(user_id, current_user):
    try:
        wallet, rows = _statement(user_id)
    except ValueError as e:
        return error_response(e)
    owner = wallet.user
    title = f"Wallet statement: {owner.name or owner.phone_number}"
    subtitle = f"Balance {float(wallet.balance):.2f} | Status {wallet.status.value}"
    return attachment(
        ReportService.pdf(title, WALLET_HEADERS, rows, subtitle=subtitle),
        "application/pdf",
        dated_filename(f"wallet-{user_id}-transactions", "pdf"),
    )

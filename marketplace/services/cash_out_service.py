import logging
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from marketplace.extensions import db
from marketplace.enums import CashOutStatus
from marketplace.models.cash_out_request import CashOutRequest
from marketplace.models.vendor import Vendor
from marketplace.models.wallet import Wallet
from marketplace.services.auth_service import AuthService
from marketplace.services.wallet_service import WalletService
from marketplace.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class CashOutService:
    """Withdrawal requests; the wallet is only debited once an admin approves"""

    @staticmethod
    def create_request(user_id: int, amount: Decimal, reason: str = None) -> CashOutRequest:
        user = AuthService.get_user_by_id(user_id)
        wallet = Wallet.query.filter_by(user_id=user.id).first()
        if not wallet:
            raise ValueError("User has no wallet")
        amount = Decimal(str(amount))
        if not wallet.can_deduct(amount):
            raise ValueError("Insufficient wallet balance")

        vendor = Vendor.query.filter_by(user_id=user.id).first()
        request = CashOutRequest(
            user_id=user.id,
            vendor_id=vendor.id if vendor else None,
            amount=amount,
            reason=reason,
        ).save()
        logger.info("Cash-out request %s for %s by user %s", request.id, amount, user.id)
        return request

    @staticmethod
    def get_request(request_id: int) -> CashOutRequest:
        request = db.session.get(CashOutRequest, request_id)
        if not request:
            raise NotFoundError("Cash-out request not found")
        return request

    @staticmethod
    def list_requests(status: str = None, page: int = 1, per_page: int = 20):
        query = CashOutRequest.query
        if status:
            query = query.filter(CashOutRequest.status == CashOutStatus(status))
        return query.order_by(CashOutRequest.created_at.desc(), CashOutRequest.id.desc()).paginate(
            page=page, per_page=per_page, error_out=False
        )

    @staticmethod
    def list_user_requests(user_id: int, page: int = 1, per_page: int = 20):
        AuthService.get_user_by_id(user_id)
        return CashOutRequest.query.filter_by(user_id=user_id).order_by(
            CashOutRequest.created_at.desc(), CashOutRequest.id.desc()
        ).paginate(page=page, per_page=per_page, error_out=False)

    @staticmethod
    def _locked_pending_request(request_id: int) -> CashOutRequest:
        request = (
            db.session.query(CashOutRequest)
            .filter_by(id=request_id)
            .with_for_update()
            .populate_existing()
            .first()
        ) # lock row until the decision commits
        if not request:
            raise NotFoundError("Cash-out request not found")
        if not request.is_pending:
            raise ValueError(f"Request already {request.status.value}")
        return request

    @staticmethod
    def approve(request_id: int) -> CashOutRequest:
        """Mark approved and debit the wallet in one database transaction"""
        try:
            request = CashOutService._locked_pending_request(request_id)
            WalletService.deduct_funds(
                request.user_id,
                request.amount,
                reason=f"Cash-out request #{request.id}",
                commit=False,
            )
            request.status = CashOutStatus.APPROVED
            db.session.commit()
        except (SQLAlchemyError, ValueError):
            db.session.rollback()
            raise

        logger.info("Cash-out request %s approved", request.id)
        return request

    @staticmethod
    def reject(request_id: int, reason: str = None) -> CashOutRequest:
        try:
            request = CashOutService._locked_pending_request(request_id)
            request.status = CashOutStatus.REJECTED
            if reason:
                request.reason = reason
            db.session.commit()
        except (SQLAlchemyError, ValueError):
            db.session.rollback()
            raise
        logger.info("Cash-out request %s rejected", request.id)
        return request

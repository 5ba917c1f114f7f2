import logging
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from marketplace.models.user import User
from marketplace.models.vendor import Vendor
from marketplace.models.wallet import Wallet, Transaction
from marketplace.extensions import db
from marketplace.enums import TransactionType, TransactionStatus, UserType, WalletStatus
from marketplace.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class WalletService:
    """Wallet ledger: every balance movement writes exactly one Transaction row
    in the same database transaction as the balance update."""

    @staticmethod
    def get_wallet_by_user_id(user_id: int) -> Wallet:
        wallet = Wallet.query.filter_by(user_id=user_id).first()
        if not wallet:
            raise NotFoundError("Wallet not found")
        return wallet

    @staticmethod
    def create_wallet(user_id: int, commit: bool = True) -> Wallet:
        if not db.session.get(User, user_id):
            raise NotFoundError("User not found")
        if Wallet.query.filter_by(user_id=user_id).first():
            raise ValueError("Wallet already exists for this user")

        wallet = Wallet(user_id=user_id, balance=Decimal("0.00"), status=WalletStatus.ACTIVE)
        db.session.add(wallet)
        if commit:
            db.session.commit()
        else:
            db.session.flush()
        logger.info("Created wallet %s for user %s", wallet.id, user_id)
        return wallet

    @staticmethod
    def get_or_create_wallet(user_id: int) -> Wallet:
        wallet = Wallet.query.filter_by(user_id=user_id).first()
        if wallet:
            return wallet
        return WalletService.create_wallet(user_id, commit=False)

    @staticmethod
    def _locked_wallet(user_id: int):
        return (
            db.session.query(Wallet)
            .filter_by(user_id=user_id)
            .with_for_update()
            .populate_existing()
            .first()
        ) # lock row

    @staticmethod
    def _append_transaction(wallet: Wallet, type_: TransactionType, amount: Decimal,
                            balance_before: Decimal, reason: str) -> Transaction:
        transaction = Transaction(
            wallet_id=wallet.id,
            type=type_,
            amount=amount,
            reason=reason,
            status=TransactionStatus.COMPLETED,
            balance_before=balance_before,
            balance_after=wallet.balance,
        )
        db.session.add(transaction)
        return transaction

    @staticmethod
    def add_funds(user_id: int, amount: Decimal, reason: str = None,
                  commit: bool = True) -> tuple[Wallet, Transaction]:
        """Credit the user's wallet, creating the wallet on first use"""
        amount = Decimal(str(amount))
        if amount <= 0:
            raise ValueError("Invalid amount")

        try:
            wallet = WalletService._locked_wallet(user_id)
            if not wallet:
                wallet = WalletService.create_wallet(user_id, commit=False)

            if not wallet.is_active:
                raise ValueError("Wallet is suspended")

            balance_before = wallet.balance
            wallet.add_balance(amount)
            transaction = WalletService._append_transaction(
                wallet, TransactionType.CREDIT, amount, balance_before,
                reason or "Funds added to wallet",
            )
            if commit:
                db.session.commit()
            else:
                db.session.flush()
        except (SQLAlchemyError, ValueError):
            db.session.rollback()
            raise

        logger.info(
            "Credited %s to wallet %s (user %s), balance %s -> %s",
            amount, wallet.id, user_id, balance_before, wallet.balance,
        )
        return wallet, transaction

    @staticmethod
    def deduct_funds(user_id: int, amount: Decimal, reason: str = None,
                     commit: bool = True) -> tuple[Wallet, Transaction]:
        """Debit the user's wallet; the balance never goes below zero"""
        amount = Decimal(str(amount))
        if amount <= 0:
            raise ValueError("Invalid amount")

        try:
            wallet = WalletService._locked_wallet(user_id)
            if not wallet:
                raise NotFoundError("Wallet not found")

            if not wallet.is_active:
                raise ValueError("Wallet is suspended")

            balance_before = wallet.balance
            wallet.deduct_balance(amount)
            transaction = WalletService._append_transaction(
                wallet, TransactionType.DEBIT, amount, balance_before,
                reason or "Funds deducted from wallet",
            )
            if commit:
                db.session.commit()
            else:
                db.session.flush()
        except (SQLAlchemyError, ValueError):
            db.session.rollback()
            raise

        logger.info(
            "Debited %s from wallet %s (user %s), balance %s -> %s",
            amount, wallet.id, user_id, balance_before, wallet.balance,
        )
        return wallet, transaction

    @staticmethod
    def set_status(user_id: int, status: str) -> Wallet:
        wallet = WalletService.get_wallet_by_user_id(user_id)
        wallet.status = WalletStatus(status)
        db.session.commit()
        logger.info("Wallet %s status set to %s", wallet.id, wallet.status.value)
        return wallet

    @staticmethod
    def get_transactions(user_id: int, page: int = 1, per_page: int = 20):
        """Get wallet transactions with pagination"""
        return (
            Transaction.query.join(Wallet)
            .filter(Wallet.user_id == user_id)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            .paginate(page=page, per_page=per_page, error_out=False)
        )

    @staticmethod
    def get_all_transactions(user_id: int) -> list:
        return (
            Transaction.query.join(Wallet)
            .filter(Wallet.user_id == user_id)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            .all()
        )

    @staticmethod
    def get_transaction(transaction_id: str) -> Transaction:
        transaction = Transaction.query.filter_by(transaction_id=transaction_id).first()
        if not transaction:
            raise NotFoundError("Transaction not found")
        return transaction

    @staticmethod
    def list_transactions(type_: str = None, page: int = 1, per_page: int = 20):
        query = Transaction.query
        if type_:
            query = query.filter(Transaction.type == TransactionType(type_))
        return query.order_by(Transaction.created_at.desc(), Transaction.id.desc()).paginate(
            page=page, per_page=per_page, error_out=False
        )

    @staticmethod
    def list_wallets(owner: str = None, page: int = 1, per_page: int = 50):
        """List wallets, optionally only vendor owners' ("vendors") or everyone else's ("users")"""
        query = Wallet.query.join(User, Wallet.user_id == User.id)
        if owner == "vendors":
            query = query.filter(User.type == UserType.VENDOR_OWNER)
        elif owner == "users":
            query = query.filter(User.type != UserType.VENDOR_OWNER)
        return query.order_by(Wallet.created_at.desc(), Wallet.id.desc()).paginate(
            page=page, per_page=per_page, error_out=False
        )

    @staticmethod
    def wallet_summary(wallet: Wallet) -> dict:
        user = wallet.user
        vendor = Vendor.query.filter_by(user_id=wallet.user_id).first()
        data = wallet.to_dict()
        data["user"] = user.to_summary() if user else None
        data["vendor"] = (
            {
                "id": vendor.id,
                "name": vendor.name,
                "type": vendor.type.value,
                "categories": [c.name for c in vendor.categories],
            }
            if vendor else None
        )
        data["recentTransactions"] = [t.to_dict() for t in wallet.recent_transactions(5)]
        return data

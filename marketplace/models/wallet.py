from decimal import Decimal

from marketplace.models.base import BaseModel, enum_column
from marketplace.extensions import db
from marketplace.enums import TransactionType, TransactionStatus, WalletStatus
from marketplace.utils.helpers import generate_transaction_id


class Wallet(BaseModel):
    """Wallet model"""

    __tablename__ = "wallets"

    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    balance = db.Column(db.Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    status = enum_column(WalletStatus, "wallet_statuses", default=WalletStatus.ACTIVE, nullable=False)

    # Relationships
    user = db.relationship("User", back_populates="wallet")
    transactions = db.relationship(
        "Transaction",
        back_populates="wallet",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    @property
    def is_active(self) -> bool:
        return self.status == WalletStatus.ACTIVE

    def can_deduct(self, amount: Decimal) -> bool:
        """Check if wallet has sufficient balance"""
        return self.balance >= amount

    def add_balance(self, amount: Decimal):
        """Add balance to wallet"""
        self.balance += amount
        return self

    def deduct_balance(self, amount: Decimal):
        """Deduct balance from wallet"""
        if not self.can_deduct(amount):
            raise ValueError("Insufficient funds")
        self.balance -= amount
        return self

    def recent_transactions(self, limit: int):
        return self.transactions.order_by(
            Transaction.created_at.desc(), Transaction.id.desc()
        ).limit(limit).all()

    def to_dict(self, recent=None):
        data = super().to_dict()
        if recent:
            data["transactions"] = [t.to_dict() for t in self.recent_transactions(recent)]
        return data


class Transaction(BaseModel):
    """Wallet ledger entry"""

    __tablename__ = "transactions"

    transaction_id = db.Column(
        db.String(36), unique=True, nullable=False, index=True, default=generate_transaction_id
    )
    wallet_id = db.Column(
        db.Integer,
        db.ForeignKey("wallets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type = enum_column(TransactionType, "transaction_types", nullable=False)
    amount = db.Column(db.Numeric(15, 2), nullable=False)
    reason = db.Column(db.Text)
    status = enum_column(
        TransactionStatus, "transaction_statuses", default=TransactionStatus.COMPLETED, nullable=False
    )
    balance_before = db.Column(db.Numeric(15, 2), nullable=False)
    balance_after = db.Column(db.Numeric(15, 2), nullable=False)

    wallet = db.relationship("Wallet", back_populates="transactions")

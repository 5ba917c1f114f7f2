import pytest
from decimal import Decimal

from marketplace import db
from marketplace.enums import WalletStatus
from marketplace.models.wallet import Wallet, Transaction
from marketplace.services.wallet_service import WalletService
from marketplace.utils.exceptions import NotFoundError


def _transaction_count(user_id):
    return Transaction.query.join(Wallet).filter(Wallet.user_id == user_id).count()


class TestWalletFunds:
    """Balance movements through the admin wallet API"""

    def test_add_funds_increases_balance_and_records_one_transaction(
        self, client, admin_headers, client_user
    ):
        response = client.post(
            f"/api/wallet/{client_user.id}/add-funds",
            headers=admin_headers,
            json={"amount": 150.25, "reason": "Top up"},
        )

        assert response.status_code == 200
        assert response.json["wallet"]["balance"] == 650.25
        transaction = response.json["transaction"]
        assert transaction["type"] == "credit"
        assert transaction["amount"] == 150.25
        assert transaction["balance_before"] == 500.0
        assert transaction["balance_after"] == 650.25
        assert transaction["reason"] == "Top up"
        assert _transaction_count(client_user.id) == 1

    def test_add_funds_creates_missing_wallet(self, client, admin_headers, admin_user):
        assert Wallet.query.filter_by(user_id=admin_user.id).first() is None

        response = client.post(
            f"/api/wallet/{admin_user.id}/add-funds",
            headers=admin_headers,
            json={"amount": 20},
        )

        assert response.status_code == 200
        assert response.json["wallet"]["balance"] == 20.0
        assert _transaction_count(admin_user.id) == 1

    def test_add_funds_unknown_user(self, client, admin_headers):
        response = client.post(
            "/api/wallet/9999/add-funds", headers=admin_headers, json={"amount": 10}
        )

        assert response.status_code == 404

    @pytest.mark.parametrize("amount", [0, -5, "abc", 0.001])
    def test_add_funds_invalid_amount(self, client, admin_headers, client_user, amount):
        response = client.post(
            f"/api/wallet/{client_user.id}/add-funds",
            headers=admin_headers,
            json={"amount": amount},
        )

        assert response.status_code == 400
        assert response.json["error"] == "Validation error"
        assert _transaction_count(client_user.id) == 0

    @pytest.mark.parametrize("amount", [0.01, "0.01"])
    def test_smallest_amount_moves_funds(self, client, admin_headers, client_user, amount):
        added = client.post(
            f"/api/wallet/{client_user.id}/add-funds",
            headers=admin_headers,
            json={"amount": amount},
        )
        assert added.status_code == 200
        assert added.json["wallet"]["balance"] == 500.01

        deducted = client.post(
            f"/api/wallet/{client_user.id}/deduct-funds",
            headers=admin_headers,
            json={"amount": amount},
        )
        assert deducted.status_code == 200
        assert deducted.json["transaction"]["amount"] == 0.01
        assert deducted.json["wallet"]["balance"] == 500.0
        assert _transaction_count(client_user.id) == 2

    def test_deduct_funds_success(self, client, admin_headers, client_user):
        response = client.post(
            f"/api/wallet/{client_user.id}/deduct-funds",
            headers=admin_headers,
            json={"amount": 200},
        )

        assert response.status_code == 200
        assert response.json["wallet"]["balance"] == 300.0
        assert response.json["transaction"]["type"] == "debit"
        assert response.json["transaction"]["balance_after"] == 300.0
        assert _transaction_count(client_user.id) == 1

    def test_deduct_more_than_balance_leaves_wallet_untouched(
        self, client, admin_headers, client_user
    ):
        response = client.post(
            f"/api/wallet/{client_user.id}/deduct-funds",
            headers=admin_headers,
            json={"amount": 500.01},
        )

        assert response.status_code == 400
        assert response.json["error"] == "Insufficient funds"
        wallet = Wallet.query.filter_by(user_id=client_user.id).first()
        assert wallet.balance == Decimal("500.00")
        assert _transaction_count(client_user.id) == 0

    def test_deduct_without_wallet(self, client, admin_headers, admin_user):
        response = client.post(
            f"/api/wallet/{admin_user.id}/deduct-funds",
            headers=admin_headers,
            json={"amount": 1},
        )

        assert response.status_code == 404

    def test_suspended_wallet_rejects_movements(self, client, admin_headers, client_user):
        response = client.patch(
            f"/api/wallet/{client_user.id}/status",
            headers=admin_headers,
            json={"status": "suspended"},
        )
        assert response.status_code == 200
        assert response.json["wallet"]["status"] == "suspended"

        for action in ("add-funds", "deduct-funds"):
            response = client.post(
                f"/api/wallet/{client_user.id}/{action}",
                headers=admin_headers,
                json={"amount": 1},
            )
            assert response.status_code == 400
            assert response.json["error"] == "Wallet is suspended"
        assert _transaction_count(client_user.id) == 0

    def test_invalid_user_id(self, client, admin_headers):
        response = client.post(
            "/api/wallet/abc/add-funds", headers=admin_headers, json={"amount": 1}
        )

        assert response.status_code == 400
        assert response.json["error"] == "Invalid user ID"

    def test_requires_admin(self, client, client_headers, client_user):
        response = client.post(
            f"/api/wallet/{client_user.id}/add-funds",
            headers=client_headers,
            json={"amount": 1},
        )

        assert response.status_code == 403

    def test_requires_authentication(self, client, client_user):
        response = client.get(f"/api/wallet/{client_user.id}")

        assert response.status_code == 401


class TestWalletQueries:
    """Read-only wallet endpoints"""

    def test_get_wallet(self, client, admin_headers, client_user):
        WalletService.add_funds(client_user.id, Decimal("10"))

        response = client.get(f"/api/wallet/{client_user.id}", headers=admin_headers)

        assert response.status_code == 200
        wallet = response.json["wallet"]
        assert wallet["balance"] == 510.0
        assert wallet["user"]["id"] == client_user.id
        assert len(wallet["transactions"]) == 1

    def test_get_missing_wallet(self, client, admin_headers, admin_user):
        response = client.get(f"/api/wallet/{admin_user.id}", headers=admin_headers)

        assert response.status_code == 404

    def test_get_balance(self, client, admin_headers, client_user):
        response = client.get(f"/api/wallet/{client_user.id}/balance", headers=admin_headers)

        assert response.status_code == 200
        assert response.json["balance"] == 500.0
        assert response.json["wallet_id"] == client_user.wallet.id

    def test_transactions_newest_first_paginated(self, client, admin_headers, client_user):
        for amount in ("1", "2", "3"):
            WalletService.add_funds(client_user.id, Decimal(amount))

        response = client.get(
            f"/api/wallet/{client_user.id}/transactions?page=1&limit=2",
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert [t["amount"] for t in response.json["transactions"]] == [3.0, 2.0]
        assert response.json["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

    def test_list_wallets_by_owner(self, client, admin_headers, client_user, vendor):
        response = client.get("/api/wallet/", headers=admin_headers)
        assert response.status_code == 200
        assert response.json["pagination"]["total"] == 2

        vendors = client.get("/api/wallet/vendors", headers=admin_headers).json["wallets"]
        assert [w["user_id"] for w in vendors] == [vendor.user_id]
        assert vendors[0]["vendor"]["name"] == "Tech Store"

        users = client.get("/api/wallet/users", headers=admin_headers).json["wallets"]
        assert [w["user_id"] for w in users] == [client_user.id]
        assert users[0]["vendor"] is None

    def test_get_transaction_by_uuid(self, client, admin_headers, client_user):
        _, transaction = WalletService.add_funds(client_user.id, Decimal("5"))

        response = client.get(
            f"/api/wallet/transaction/{transaction.transaction_id}", headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json["transaction"]["id"] == transaction.id
        assert response.json["transaction"]["user"]["id"] == client_user.id

    def test_get_unknown_transaction(self, client, admin_headers):
        response = client.get("/api/wallet/transaction/not-a-real-id", headers=admin_headers)

        assert response.status_code == 404


class TestWalletCreation:

    def test_create_wallet(self, client, admin_headers, admin_user):
        response = client.post(f"/api/wallet/{admin_user.id}", headers=admin_headers)

        assert response.status_code == 201
        assert response.json["wallet"]["balance"] == 0.0

    def test_create_existing_wallet(self, client, admin_headers, client_user):
        response = client.post(f"/api/wallet/{client_user.id}", headers=admin_headers)

        assert response.status_code == 400
        assert response.json["error"] == "Wallet already exists for this user"

    def test_create_wallet_unknown_user(self, client, admin_headers):
        response = client.post("/api/wallet/4242", headers=admin_headers)

        assert response.status_code == 404


class TestWalletExports:

    def test_export_csv(self, client, admin_headers, client_user):
        WalletService.add_funds(client_user.id, Decimal("12.5"), reason='Refund, "late"')

        response = client.get(f"/api/wallet/{client_user.id}/export/csv", headers=admin_headers)

        assert response.status_code == 200
        assert response.mimetype == "text/csv"
        assert "attachment" in response.headers["Content-Disposition"]
        lines = response.get_data(as_text=True).splitlines()
        assert lines[0] == "Date,Type,Amount,Reason,Status,Transaction ID,User Name,User Email"
        assert len(lines) == 2
        assert 'credit,12.5,"Refund, ""late""",completed' in lines[1]
        assert lines[1].endswith("Test Client,client@test.com")

    def test_export_pdf(self, client, admin_headers, client_user):
        WalletService.add_funds(client_user.id, Decimal("12.5"))

        response = client.get(f"/api/wallet/{client_user.id}/export/pdf", headers=admin_headers)

        assert response.status_code == 200
        assert response.mimetype == "application/pdf"
        assert response.data.startswith(b"%PDF")

    def test_export_missing_wallet(self, client, admin_headers, admin_user):
        response = client.get(f"/api/wallet/{admin_user.id}/export/csv", headers=admin_headers)

        assert response.status_code == 404


class TestWalletService:
    """Ledger invariants at the service level"""

    def test_add_funds_records_balances(self, app, client_user):
        wallet, transaction = WalletService.add_funds(client_user.id, Decimal("0.10"))

        assert wallet.balance == Decimal("500.10")
        assert transaction.balance_before == Decimal("500.00")
        assert transaction.balance_after == Decimal("500.10")

    def test_deduct_insufficient_rolls_back(self, app, client_user):
        with pytest.raises(ValueError, match="Insufficient funds"):
            WalletService.deduct_funds(client_user.id, Decimal("1000"))

        wallet = WalletService.get_wallet_by_user_id(client_user.id)
        assert wallet.balance == Decimal("500.00")
        assert wallet.transactions.count() == 0

    def test_deduct_exact_balance(self, app, client_user):
        wallet, _ = WalletService.deduct_funds(client_user.id, Decimal("500"))

        assert wallet.balance == Decimal("0.00")

    def test_invalid_amount(self, app, client_user):
        with pytest.raises(ValueError, match="Invalid amount"):
            WalletService.add_funds(client_user.id, Decimal("0"))

    def test_set_status(self, app, client_user):
        wallet = WalletService.set_status(client_user.id, "suspended")

        assert wallet.status == WalletStatus.SUSPENDED

    def test_missing_wallet(self, app, admin_user):
        with pytest.raises(NotFoundError):
            WalletService.get_wallet_by_user_id(admin_user.id)

    def test_uncommitted_movement_rolls_back_with_session(self, app, client_user):
        WalletService.add_funds(client_user.id, Decimal("25"), commit=False)
        db.session.rollback()

        wallet = WalletService.get_wallet_by_user_id(client_user.id)
        assert wallet.balance == Decimal("500.00")
        assert wallet.transactions.count() == 0

import pytest
from decimal import Decimal
from sqlalchemy import update

from marketplace import db
from marketplace.enums import CashOutStatus
from marketplace.models.cash_out_request import CashOutRequest
from marketplace.services.cash_out_service import CashOutService
from marketplace.services.wallet_service import WalletService


@pytest.fixture
def pending_request(app, client_user):
    return CashOutService.create_request(client_user.id, Decimal("120.00"), "Monthly payout")


class TestCreateCashOut:

    def test_create_for_self(self, client, client_headers, client_user):
        response = client.post(
            f"/api/cashout-requests/{client_user.id}",
            headers=client_headers,
            json={"amount": 100, "reason": "Payout"},
        )

        assert response.status_code == 201
        body = response.json["cashOutRequest"]
        assert body["status"] == "pending"
        assert body["amount"] == 100.0
        assert body["vendor"] is None
        # Nothing moves until an admin approves
        assert WalletService.get_wallet_by_user_id(client_user.id).balance == Decimal("500.00")

    def test_smallest_amount(self, client, client_headers, client_user):
        response = client.post(
            f"/api/cashout-requests/{client_user.id}",
            headers=client_headers,
            json={"amount": 0.01},
        )

        assert response.status_code == 201
        assert response.json["cashOutRequest"]["amount"] == 0.01

    def test_vendor_owner_request_carries_vendor(self, client, owner_headers, vendor_owner, vendor):
        WalletService.add_funds(vendor_owner.id, Decimal("50"))

        response = client.post(
            f"/api/cashout-requests/{vendor_owner.id}",
            headers=owner_headers,
            json={"amount": 50},
        )

        assert response.status_code == 201
        assert response.json["cashOutRequest"]["vendor_id"] == vendor.id

    def test_insufficient_balance(self, client, client_headers, client_user):
        response = client.post(
            f"/api/cashout-requests/{client_user.id}",
            headers=client_headers,
            json={"amount": 500.01},
        )

        assert response.status_code == 400
        assert response.json["error"] == "Insufficient wallet balance"

    def test_user_without_wallet(self, client, admin_headers, admin_user):
        response = client.post(
            f"/api/cashout-requests/{admin_user.id}",
            headers=admin_headers,
            json={"amount": 1},
        )

        assert response.status_code == 400
        assert response.json["error"] == "User has no wallet"

    def test_unknown_user(self, client, admin_headers):
        response = client.post(
            "/api/cashout-requests/777", headers=admin_headers, json={"amount": 1}
        )

        assert response.status_code == 404

    def test_cannot_request_for_someone_else(self, client, client_headers, vendor_owner):
        response = client.post(
            f"/api/cashout-requests/{vendor_owner.id}",
            headers=client_headers,
            json={"amount": 1},
        )

        assert response.status_code == 403


class TestCashOutDecisions:

    def test_approve_debits_wallet_once(self, client, admin_headers, client_user, pending_request):
        response = client.patch(
            f"/api/cashout-requests/{pending_request.id}/approve", headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json["cashOutRequest"]["status"] == "approved"
        wallet = WalletService.get_wallet_by_user_id(client_user.id)
        assert wallet.balance == Decimal("380.00")
        transactions = wallet.transactions.all()
        assert len(transactions) == 1
        assert transactions[0].amount == Decimal("120.00")
        assert transactions[0].reason == f"Cash-out request #{pending_request.id}"

    def test_approve_twice(self, client, admin_headers, pending_request):
        client.patch(f"/api/cashout-requests/{pending_request.id}/approve", headers=admin_headers)
        response = client.patch(
            f"/api/cashout-requests/{pending_request.id}/approve", headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json["error"] == "Request already approved"

    def test_approve_rechecks_balance(self, client, admin_headers, client_user, pending_request):
        WalletService.deduct_funds(client_user.id, Decimal("450"))

        response = client.patch(
            f"/api/cashout-requests/{pending_request.id}/approve", headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json["error"] == "Insufficient funds"
        request = CashOutService.get_request(pending_request.id)
        assert request.status == CashOutStatus.PENDING
        assert WalletService.get_wallet_by_user_id(client_user.id).balance == Decimal("50.00")

    def test_approve_reads_status_under_lock(self, app, client_user, pending_request):
        assert pending_request.is_pending
        # another admin rejected it after this session loaded the row
        db.session.execute(
            update(CashOutRequest)
            .where(CashOutRequest.id == pending_request.id)
            .values(status=CashOutStatus.REJECTED)
            .execution_options(synchronize_session=False)
        )

        with pytest.raises(ValueError, match="Request already rejected"):
            CashOutService.approve(pending_request.id)

        wallet = WalletService.get_wallet_by_user_id(client_user.id)
        assert wallet.balance == Decimal("500.00")
        assert wallet.transactions.count() == 0

    def test_reject_reads_status_under_lock(self, app, pending_request):
        assert pending_request.is_pending
        db.session.execute(
            update(CashOutRequest)
            .where(CashOutRequest.id == pending_request.id)
            .values(status=CashOutStatus.APPROVED)
            .execution_options(synchronize_session=False)
        )

        with pytest.raises(ValueError, match="Request already approved"):
            CashOutService.reject(pending_request.id)

    def test_reject_unknown(self, app):
        with pytest.raises(ValueError, match="Cash-out request not found"):
            CashOutService.reject(12345)

    def test_reject(self, client, admin_headers, client_user, pending_request):
        response = client.patch(
            f"/api/cashout-requests/{pending_request.id}/reject",
            headers=admin_headers,
            json={"reason": "Missing documents"},
        )

        assert response.status_code == 200
        assert response.json["cashOutRequest"]["status"] == "rejected"
        assert response.json["cashOutRequest"]["reason"] == "Missing documents"
        assert WalletService.get_wallet_by_user_id(client_user.id).balance == Decimal("500.00")

    def test_reject_after_approval(self, client, admin_headers, pending_request):
        CashOutService.approve(pending_request.id)

        response = client.patch(
            f"/api/cashout-requests/{pending_request.id}/reject", headers=admin_headers, json={}
        )

        assert response.status_code == 400

    def test_only_admin_decides(self, client, client_headers, pending_request):
        response = client.patch(
            f"/api/cashout-requests/{pending_request.id}/approve", headers=client_headers
        )

        assert response.status_code == 403


class TestCashOutQueries:

    def test_list_with_status_filter(self, client, admin_headers, client_user, pending_request):
        other = CashOutService.create_request(client_user.id, Decimal("10"))
        CashOutService.reject(other.id)

        response = client.get("/api/cashout-requests/?status=pending", headers=admin_headers)

        assert response.status_code == 200
        assert [r["id"] for r in response.json["cashOutRequests"]] == [pending_request.id]
        assert response.json["pagination"]["total"] == 1

    def test_list_invalid_status(self, client, admin_headers):
        response = client.get("/api/cashout-requests/?status=paid", headers=admin_headers)

        assert response.status_code == 400

    def test_list_for_user(self, client, client_headers, client_user, pending_request):
        response = client.get(
            f"/api/cashout-requests/user/{client_user.id}", headers=client_headers
        )

        assert response.status_code == 200
        assert len(response.json["cashOutRequests"]) == 1
        assert response.json["pagination"] == {"page": 1, "limit": 20, "total": 1, "pages": 1}

    def test_list_for_user_paginated(self, client, client_headers, client_user, pending_request):
        newer = CashOutService.create_request(client_user.id, Decimal("5"))

        response = client.get(
            f"/api/cashout-requests/user/{client_user.id}?page=1&limit=1", headers=client_headers
        )

        assert response.status_code == 200
        assert [r["id"] for r in response.json["cashOutRequests"]] == [newer.id]
        assert response.json["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}

    def test_get_by_id(self, client, admin_headers, pending_request):
        response = client.get(f"/api/cashout-requests/{pending_request.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json["cashOutRequest"]["user"]["name"] == "Test Client"

    def test_get_unknown(self, client, admin_headers):
        response = client.get("/api/cashout-requests/999", headers=admin_headers)

        assert response.status_code == 404

    def test_invalid_id(self, client, admin_headers):
        response = client.get("/api/cashout-requests/xyz", headers=admin_headers)

        assert response.status_code == 400
        assert response.json["error"] == "Invalid request ID"

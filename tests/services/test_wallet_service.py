from decimal import Decimal

import pytest

from tourneyhub.models import Wallet, WalletTransaction
from tourneyhub.services import wallet_service


class TestWalletService:

    def test_get_or_create_wallet_creates_empty_wallet(self, db):
        wallet = wallet_service.get_or_create_wallet(db, "user-1")
        db.commit()

        assert wallet.user_uuid == "user-1"
        assert wallet.balance == 0
        assert wallet.currency == "JD"
        assert db.query(Wallet).count() == 1

    def test_get_or_create_wallet_returns_existing(self, db):
        first = wallet_service.get_or_create_wallet(db, "user-1")
        db.commit()

        assert wallet_service.get_or_create_wallet(db, "user-1").id == first.id
        assert db.query(Wallet).count() == 1

    def test_credit_adds_to_balance_and_ledger(self, db):
        wallet_service.credit(db, "user-1", 5, type="refund", reference_id="42", now=2000)
        wallet_service.credit(db, "user-1", Decimal("2.50"), type="refund", reference_id="43", now=2001)
        db.commit()

        wallet = wallet_service.get_wallet(db, "user-1")
        assert wallet.balance == Decimal("7.50")
        assert wallet.updated_at == 2001
        assert db.query(WalletTransaction).count() == 2

    def test_credit_does_not_commit(self, db):
        wallet_service.credit(db, "user-1", 5, type="refund")
        db.rollback()

        assert db.query(Wallet).count() == 0
        assert db.query(WalletTransaction).count() == 0

    @pytest.mark.parametrize("amount", [0, -1, "0.001"])
    def test_credit_rejects_non_positive_amounts(self, db, amount):
        with pytest.raises(ValueError):
            wallet_service.credit(db, "user-1", amount, type="refund")

    def test_list_transactions_newest_first_and_filtered(self, db):
        wallet_service.credit(db, "user-1", 1, type="refund", now=100)
        wallet_service.credit(db, "user-1", 2, type="prize", now=300)
        wallet_service.credit(db, "user-1", 3, type="refund", now=200)
        wallet_service.credit(db, "user-2", 4, type="refund", now=400)
        db.commit()

        transactions = wallet_service.list_transactions(db, "user-1")
        assert [t.created_at for t in transactions] == [300, 200, 100]

        refunds = wallet_service.list_transactions(db, "user-1", type="refund")
        assert [float(t.amount) for t in refunds] == [3, 1]

        page = wallet_service.list_transactions(db, "user-1", limit=1, offset=1)
        assert [t.created_at for t in page] == [200]

from sqlalchemy import Column, Integer, Numeric, String

from tourneyhub.core.database import Base
from tourneyhub.core.timeutils import epoch_now

class Wallet(Base):
    __tablename__ = "wallets"

    id = Column(Integer, primary_key=True, index=True)
    user_uuid = Column(String, unique=True, index=True, nullable=False)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String, nullable=False, default="JD")
    created_at = Column(Integer, nullable=False, default=epoch_now)
    updated_at = Column(Integer, nullable=False, default=epoch_now, onupdate=epoch_now)


class WalletTransaction(Base):
    """Append-only ledger entry; rows are never updated or deleted."""
    __tablename__ = "wallet_transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_uuid = Column(String, nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    type = Column(String, nullable=False) # e.g., "refund", "deposit", "withdrawal", "entry_fee"
    description = Column(String, nullable=True)
    reference_id = Column(String, nullable=True) # Tournament id for refunds
    created_at = Column(Integer, nullable=False, default=epoch_now)

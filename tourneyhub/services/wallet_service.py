import logging
from decimal import Decimal
from typing import List, Optional, Union

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tourneyhub.core.config import settings
from tourneyhub.core.timeutils import epoch_now
from tourneyhub.models.wallet import Wallet, WalletTransaction

logger = logging.getLogger(__name__)

def _to_amount(value: Union[int, float, Decimal, str]) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))

def get_wallet(db: Session, user_uuid: str) -> Optional[Wallet]:
    return db.query(Wallet).filter(Wallet.user_uuid == user_uuid).first()

def get_or_create_wallet(db: Session, user_uuid: str) -> Wallet:
    """
    Returns the user's wallet, creating an empty one if none exists.
    Does not commit; the caller owns the transaction.
    """
    wallet = get_wallet(db, user_uuid)
    if wallet:
        return wallet

    try:
        # Savepoint so losing a creation race does not poison the caller's transaction
        with db.begin_nested():
            wallet = Wallet(user_uuid=user_uuid, balance=0, currency=settings.CURRENCY)
            db.add(wallet)
    except IntegrityError:
        wallet = get_wallet(db, user_uuid)
    return wallet

def credit(
    db: Session,
    user_uuid: str,
    amount: Union[int, float, Decimal],
    type: str,
    description: Optional[str] = None,
    reference_id: Optional[str] = None,
    now: Optional[int] = None,
) -> WalletTransaction:
    """
    Adds ``amount`` to the user's balance and appends the matching ledger entry.

    The balance change is a single relative UPDATE so concurrent credits never
    overwrite each other. Nothing is committed here.
    """
    amount = _to_amount(amount)
    if amount <= 0:
        raise ValueError("Credit amount must be positive")
    now = now if now is not None else epoch_now()

    wallet = get_or_create_wallet(db, user_uuid)
    db.execute(
        update(Wallet)
        .where(Wallet.id == wallet.id)
        .values(balance=Wallet.balance + amount, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    db.expire(wallet, ["balance", "updated_at"])

    transaction = WalletTransaction(
        user_uuid=user_uuid,
        amount=amount,
        type=type,
        description=description,
        reference_id=reference_id,
        created_at=now,
    )
    db.add(transaction)
    logger.info("Credited %s %s to wallet of %s (%s, ref=%s)", amount, settings.CURRENCY, user_uuid, type, reference_id)
    return transaction

def list_transactions(
    db: Session,
    user_uuid: str,
    limit: int = 20,
    offset: int = 0,
    type: Optional[str] = None,
) -> List[WalletTransaction]:
    query = db.query(WalletTransaction).filter(WalletTransaction.user_uuid == user_uuid)
    if type:
        query = query.filter(WalletTransaction.type == type)
    return (
        query.order_by(WalletTransaction.created_at.desc(), WalletTransaction.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )

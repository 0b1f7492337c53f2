import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tourneyhub.api.dependencies import get_db
from tourneyhub.core.config import settings
from tourneyhub.core.database import atomic
from tourneyhub.core.errors import InternalError, TourneyError
from tourneyhub.schemas import auth_schemas, wallet_schemas
from tourneyhub.services import auth_service, wallet_service

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=wallet_schemas.WalletResponse)
def get_wallet_endpoint(
    db: Session = Depends(get_db),
    current_user: auth_schemas.CurrentUser = Depends(auth_service.get_current_user),
):
    try:
        with atomic(db):
            wallet = wallet_service.get_or_create_wallet(db, current_user.uuid)
        db.refresh(wallet)
    except TourneyError:
        raise
    except Exception:
        logger.exception("Fetching wallet of %s failed", current_user.uuid)
        raise InternalError("Failed to fetch wallet")
    return {"success": True, "wallet": wallet}

@router.get("/transactions", response_model=wallet_schemas.WalletTransactionListResponse)
def list_transactions_endpoint(
    limit: int = settings.DEFAULT_PAGE_LIMIT,
    offset: int = 0,
    type: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: auth_schemas.CurrentUser = Depends(auth_service.get_current_user),
):
    limit = max(1, min(limit, settings.MAX_PAGE_LIMIT))
    try:
        transactions = wallet_service.list_transactions(
            db, current_user.uuid, limit=limit, offset=max(0, offset), type=type
        )
    except TourneyError:
        raise
    except Exception:
        logger.exception("Fetching transactions of %s failed", current_user.uuid)
        raise InternalError("Failed to fetch transactions")
    return {"success": True, "transactions": transactions}

from pydantic import BaseModel
from typing import List, Optional

class WalletRead(BaseModel):
    balance: float
    currency: str
    updated_at: int

    class Config:
        from_attributes = True

class WalletResponse(BaseModel):
    success: bool = True
    wallet: WalletRead

class WalletTransactionRead(BaseModel):
    id: int
    amount: float
    type: str
    description: Optional[str] = None
    reference_id: Optional[str] = None
    created_at: int

    class Config:
        from_attributes = True

class WalletTransactionListResponse(BaseModel):
    success: bool = True
    transactions: List[WalletTransactionRead]

from pydantic import BaseModel, Field
from typing import Optional

class JoinRequest(BaseModel):
    tournament_id: int = Field(..., gt=0, description="Tournament to register for")
    team_id: Optional[int] = Field(None, gt=0, description="Optional team entering with the player")

class UnregisterRequest(BaseModel):
    tournament_id: int = Field(..., gt=0, description="Tournament to withdraw from")

class JoinResponse(BaseModel):
    success: bool = True
    message: str
    alreadyRegistered: bool = False

class UnregisterResponse(BaseModel):
    success: bool = True
    message: str
    refund_amount: Optional[float] = None

class RegistrationRead(BaseModel):
    id: int
    tournament_id: int
    user_uuid: str
    team_id: Optional[int] = None
    status: str
    joined_at: int

    class Config:
        from_attributes = True

class RegisteredPlayerRead(RegistrationRead):
    username: Optional[str] = None
    avatar_url: Optional[str] = None

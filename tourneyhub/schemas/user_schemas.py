from pydantic import BaseModel, Field
from typing import Optional

class ProfileUpdate(BaseModel):
    username: str = Field(..., description="3-20 letters, digits or underscores")
    avatar_url: Optional[str] = None
    phone: Optional[str] = None

class ProfileRead(BaseModel):
    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    role: str
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    created_at: int

    class Config:
        from_attributes = True

class ProfileResponse(BaseModel):
    success: bool = True
    profile: ProfileRead

class UsernameAvailability(BaseModel):
    success: bool = True
    username: str
    available: bool

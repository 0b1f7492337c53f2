from pydantic import BaseModel, Field
from typing import List, Optional

from .registration_schemas import RegistrationRead, RegisteredPlayerRead

class TournamentCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    game_slug: str = Field(..., min_length=1)
    description: Optional[str] = None
    rules: Optional[str] = None
    format_type: str = "single_elimination"
    match_format: str = "1v1"
    platform: str = "PC"
    entry_fee: float = Field(0, ge=0)
    prize_pool: float = Field(0, ge=0)
    max_players: int = Field(..., ge=1)
    start_date: str = Field(..., min_length=1) # e.g., "2025-03-01"
    start_time: str = "18:00"
    registration_deadline: Optional[str] = None # Defaults to start_date

class TournamentRead(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    rules: Optional[str] = None
    format_type: Optional[str] = None
    match_format: Optional[str] = None
    platform: Optional[str] = None
    entry_fee: float
    prize_pool: float
    max_players: int
    current_players: int
    start_date: Optional[str] = None
    start_time: Optional[str] = None
    registration_deadline: Optional[str] = None
    status: str
    is_featured: bool
    game_name: str
    game_slug: str
    created_by: Optional[str] = None
    created_at: int

    class Config:
        from_attributes = True

class TournamentDetail(TournamentRead):
    user_registration: Optional[RegistrationRead] = None
    is_admin: bool = False
    registered_players: List[RegisteredPlayerRead] = []

class TournamentStatusUpdate(BaseModel):
    status: str = Field(..., description="Target lifecycle status (e.g., registration, upcoming, live)")

class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    hasMore: bool

class TournamentListResponse(BaseModel):
    success: bool = True
    tournaments: List[TournamentRead]
    pagination: Pagination

class TournamentResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    tournament: TournamentRead

class TournamentDetailResponse(BaseModel):
    success: bool = True
    tournament: TournamentDetail

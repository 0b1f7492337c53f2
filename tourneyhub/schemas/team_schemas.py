from pydantic import BaseModel, Field
from typing import List, Optional

class TeamActionRequest(BaseModel):
    """
    Body of the multi-action team management endpoint.
    Which of the optional fields are required depends on ``action``.
    """
    action: str = Field(..., description="get_team_by_id, get_user_teams, create, update_team or delete_team")
    team_id: Optional[int] = None
    user_uuid: Optional[str] = None
    name: Optional[str] = None
    tag: Optional[str] = None
    description: Optional[str] = None
    game_id: Optional[int] = None

class TeamMemberRead(BaseModel):
    user_uuid: str
    role: str
    joined_at: int

    class Config:
        from_attributes = True

class TeamRead(BaseModel):
    id: int
    name: str
    tag: str
    description: str
    logo_url: Optional[str] = None
    game_id: int
    game_name: str
    captain_user_uuid: str
    member_count: int
    created_at: int

    class Config:
        from_attributes = True

class TeamCreatedRead(TeamRead):
    invite_code: str # Only disclosed to the captain at creation time

class TeamDetailResponse(BaseModel):
    success: bool = True
    team: TeamRead
    members: List[TeamMemberRead]

class TeamListResponse(BaseModel):
    success: bool = True
    teams: List[TeamRead]

class TeamCreatedResponse(BaseModel):
    success: bool = True
    team: TeamCreatedRead

from sqlalchemy import Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from tourneyhub.core.database import Base
from tourneyhub.core.timeutils import epoch_now

class Team(Base):
    __tablename__ = "teams_proper"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False) # Case-sensitive exact match
    tag = Column(String, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    logo_url = Column(String, nullable=True)
    game_id = Column(Integer, ForeignKey("games.id"), nullable=False)
    captain_user_uuid = Column(String, nullable=False, index=True)
    invite_code = Column(String, nullable=False)
    created_at = Column(Integer, nullable=False, default=epoch_now)
    updated_at = Column(Integer, nullable=False, default=epoch_now, onupdate=epoch_now)

    game = relationship("Game", back_populates="teams")
    members = relationship("TeamMember", back_populates="team", cascade="all, delete-orphan")

    @property
    def game_name(self) -> str:
        return self.game.name if self.game else "Unknown Game"

    @property
    def member_count(self) -> int:
        return len(self.members)


class TeamMember(Base):
    __tablename__ = "team_members_proper"

    id = Column(Integer, primary_key=True, index=True)
    team_id = Column(Integer, ForeignKey("teams_proper.id", ondelete="CASCADE"), nullable=False, index=True)
    user_uuid = Column(String, nullable=False, index=True)
    role = Column(String, nullable=False, default="member") # captain, co_captain, member
    joined_at = Column(Integer, nullable=False, default=epoch_now)

    team = relationship("Team", back_populates="members")

    __table_args__ = (UniqueConstraint("team_id", "user_uuid", name="uq_team_member"),)

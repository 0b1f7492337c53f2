from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from tourneyhub.core.database import Base
from tourneyhub.core.timeutils import epoch_now

class Registration(Base):
    __tablename__ = "tournament_players"

    id = Column(Integer, primary_key=True, index=True)
    tournament_id = Column(Integer, ForeignKey("tournaments.id", ondelete="CASCADE"), nullable=False, index=True)
    user_uuid = Column(String, nullable=False, index=True)
    team_id = Column(Integer, ForeignKey("teams_proper.id", ondelete="SET NULL"), nullable=True)
    status = Column(String, nullable=False, default="registered")
    joined_at = Column(Integer, nullable=False, default=epoch_now) # Drives the unregistration cooldown

    tournament = relationship("Tournament", back_populates="registrations")
    team = relationship("Team")

    # At most one registration per (tournament, user); concurrent duplicate joins hit this
    __table_args__ = (UniqueConstraint("tournament_id", "user_uuid", name="uq_tournament_player"),)

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from tourneyhub.core.database import Base
from tourneyhub.core.timeutils import epoch_now

class Game(Base):
    __tablename__ = "games"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    tournaments = relationship("Tournament", back_populates="game")
    teams = relationship("Team", back_populates="game")


class Tournament(Base):
    __tablename__ = "tournaments"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    game_id = Column(Integer, ForeignKey("games.id"), nullable=True)
    description = Column(Text, nullable=True)
    rules = Column(Text, nullable=True)
    format_type = Column(String, default="single_elimination")
    match_format = Column(String, default="1v1")
    platform = Column(String, default="PC")
    entry_fee = Column(Numeric(12, 2), nullable=False, default=0)
    prize_pool = Column(Numeric(12, 2), nullable=False, default=0)
    max_players = Column(Integer, nullable=False)
    current_players = Column(Integer, nullable=False, default=0) # Denormalized count of tournament_players rows
    start_date = Column(String, nullable=True) # e.g., "2025-03-01"
    start_time = Column(String, nullable=True) # e.g., "18:00"
    registration_deadline = Column(String, nullable=True)
    status = Column(String, nullable=False, default="draft") # draft, registration, upcoming, live, completed, cancelled
    is_featured = Column(Boolean, nullable=False, default=False)
    created_by = Column(String, ForeignKey("users.id"), nullable=True)
    created_at = Column(Integer, nullable=False, default=epoch_now)
    updated_at = Column(Integer, nullable=False, default=epoch_now, onupdate=epoch_now)

    game = relationship("Game", back_populates="tournaments")
    creator = relationship("User", back_populates="created_tournaments")
    registrations = relationship("Registration", back_populates="tournament", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("current_players >= 0", name="ck_tournament_players_non_negative"),
        CheckConstraint("current_players <= max_players", name="ck_tournament_players_within_capacity"),
    )

    @property
    def game_name(self) -> str:
        return self.game.name if self.game else "Unknown Game"

    @property
    def game_slug(self) -> str:
        return self.game.slug if self.game else "unknown"

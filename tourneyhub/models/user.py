from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from tourneyhub.core.database import Base
from tourneyhub.core.timeutils import epoch_now

class User(Base):
    __tablename__ = "users"

    # Identity comes from the authentication service, so the key is its uuid
    id = Column(String, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=True) # Enforced by the storage layer, not by a pre-check
    email = Column(String, nullable=True)
    role = Column(String, nullable=False, default="user") # "user" or "admin"
    avatar_url = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    created_at = Column(Integer, nullable=False, default=epoch_now)
    updated_at = Column(Integer, nullable=False, default=epoch_now, onupdate=epoch_now)

    created_tournaments = relationship("Tournament", back_populates="creator")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

import logging
import re
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tourneyhub.core.database import atomic
from tourneyhub.core.errors import DuplicateName, NotFound, ValidationFailed
from tourneyhub.core.timeutils import epoch_now
from tourneyhub.models.user import User
from tourneyhub.schemas import user_schemas

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]{3,20}$")


def validate_username(username: Optional[str]) -> str:
    username = (username or "").strip()
    if not USERNAME_PATTERN.match(username):
        raise ValidationFailed("Username must be 3-20 characters and contain only letters, numbers and underscores")
    return username

def get_user(db: Session, user_uuid: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_uuid).first()

def get_profile(db: Session, user_uuid: str) -> User:
    user = get_user(db, user_uuid)
    if not user:
        raise NotFound("User profile not found")
    return user

def is_username_available(db: Session, username: str, user_uuid: Optional[str] = None) -> bool:
    """A username is available if nobody holds it, or the asking user already does."""
    query = db.query(User.id).filter(User.username == username)
    if user_uuid:
        query = query.filter(User.id != user_uuid)
    return query.first() is None

def upsert_profile(db: Session, user_uuid: str, profile: user_schemas.ProfileUpdate) -> User:
    """
    Creates or updates the caller's profile row.

    Username uniqueness is left to the unique index on ``users.username``;
    a violation is reported as a taken username.
    """
    username = validate_username(profile.username)
    now = epoch_now()

    try:
        with atomic(db):
            user = get_user(db, user_uuid)
            if user is None:
                user = User(id=user_uuid, role="user", created_at=now)
                db.add(user)
            user.username = username
            user.avatar_url = profile.avatar_url
            user.phone = profile.phone
            user.updated_at = now
    except IntegrityError:
        raise DuplicateName("Username is already taken")

    db.refresh(user)
    logger.info("Profile of %s saved with username %s", user_uuid, username)
    return user

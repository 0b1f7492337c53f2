import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tourneyhub.api.dependencies import get_db
from tourneyhub.core.errors import InternalError, TourneyError
from tourneyhub.schemas import auth_schemas, user_schemas
from tourneyhub.services import auth_service, user_service

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/me", response_model=user_schemas.ProfileResponse)
def read_users_me(
    db: Session = Depends(get_db),
    current_user: auth_schemas.CurrentUser = Depends(auth_service.get_current_user),
):
    try:
        profile = user_service.get_profile(db, current_user.uuid)
    except TourneyError:
        raise
    except Exception:
        logger.exception("Fetching profile of %s failed", current_user.uuid)
        raise InternalError("Failed to fetch profile")
    return {"success": True, "profile": profile}

@router.put("/me", response_model=user_schemas.ProfileResponse)
def update_users_me(
    profile_in: user_schemas.ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: auth_schemas.CurrentUser = Depends(auth_service.get_current_user),
):
    try:
        profile = user_service.upsert_profile(db, current_user.uuid, profile_in)
    except TourneyError:
        raise
    except Exception:
        logger.exception("Saving profile of %s failed", current_user.uuid)
        raise InternalError("Failed to update profile")
    return {"success": True, "profile": profile}

@router.get("/check-username", response_model=user_schemas.UsernameAvailability)
def check_username(
    username: str,
    db: Session = Depends(get_db),
    current_user: auth_schemas.CurrentUser = Depends(auth_service.get_current_user),
):
    username = user_service.validate_username(username)
    try:
        available = user_service.is_username_available(db, username, current_user.uuid)
    except Exception:
        logger.exception("Username check for %r failed", username)
        raise InternalError("Failed to check username")
    return {"success": True, "username": username, "available": available}

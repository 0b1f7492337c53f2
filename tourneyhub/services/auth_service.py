from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from tourneyhub.api.dependencies import get_db
from tourneyhub.core.errors import Forbidden, Unauthenticated
from tourneyhub.models.user import User
from tourneyhub.schemas import auth_schemas

ANONYMOUS_USER = "anonymous"


def _identity(user_uuid: Optional[str], user_name: Optional[str]) -> Optional[auth_schemas.CurrentUser]:
    user_uuid = (user_uuid or "").strip()
    if not user_uuid or user_uuid == ANONYMOUS_USER:
        return None
    return auth_schemas.CurrentUser(uuid=user_uuid, name=user_name)

def get_current_user(
    x_user_uuid: Optional[str] = Header(None),
    x_user_name: Optional[str] = Header(None),
) -> auth_schemas.CurrentUser:
    # The upstream authentication service asserts identity through these headers
    current_user = _identity(x_user_uuid, x_user_name)
    if current_user is None:
        raise Unauthenticated("Authentication required")
    return current_user

def get_optional_user(
    x_user_uuid: Optional[str] = Header(None),
    x_user_name: Optional[str] = Header(None),
) -> Optional[auth_schemas.CurrentUser]:
    return _identity(x_user_uuid, x_user_name)

def get_user_record(db: Session, current_user: Optional[auth_schemas.CurrentUser]) -> Optional[User]:
    if current_user is None:
        return None
    return db.query(User).filter(User.id == current_user.uuid).first()

def require_admin(
    current_user: auth_schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    user = get_user_record(db, current_user)
    if not user or not user.is_admin:
        raise Forbidden("Admin access required")
    return user

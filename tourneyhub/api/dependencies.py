from typing import Optional

from fastapi import Header

from tourneyhub.core.config import settings
from tourneyhub.core.database import SessionLocal
from tourneyhub.core.errors import InternalError

def get_db(
    x_database_url: Optional[str] = Header(None),
    x_database_token: Optional[str] = Header(None),
):
    # Per-request database endpoint, falling back to the configured one
    url = x_database_url or settings.DATABASE_URL
    if not url:
        raise InternalError("Database configuration missing")
    token = x_database_token or (None if x_database_url else settings.DATABASE_AUTH_TOKEN)

    db = SessionLocal(url, token)
    try:
        yield db
    finally:
        db.close()

from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./tourneyhub.db"
    DATABASE_AUTH_TOKEN: Optional[str] = None
    CREATE_TABLES: bool = True

    UNREGISTER_COOLDOWN_SECONDS: int = 300 # Minimum age of a registration before it can be withdrawn
    DEFAULT_PAGE_LIMIT: int = 20
    MAX_PAGE_LIMIT: int = 100
    CURRENCY: str = "JD"

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL
from typing import Optional
import os

class Settings(BaseSettings):
    # Application
    APP_NAME: str = "eHealth Booking"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    TESTING: bool = os.getenv("TESTING", "0").lower() in ("1", "true", "t", "yes", "y")
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Database - assembled from the DB_* parts unless DATABASE_URL is given
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_NAME: str = "ehealth_db"
    DATABASE_URL: Optional[str] = None

    # Connection pool
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 0
    DB_POOL_TIMEOUT: int = 30  # seconds a request waits for a free connection
    DB_POOL_RECYCLE: int = 1800

    # Sessions
    SESSION_SECRET: str = "thisisasecret"
    SESSION_COOKIE_NAME: str = "ehealth_session"
    SESSION_TTL_SECONDS: int = 86400
    SESSION_BACKEND: str = "redis"  # "redis" or "memory"

    # Redis (session backing store)
    REDIS_URL: str = "redis://localhost:6379"

    @property
    def get_database_url(self) -> str:
        """Return DATABASE_URL, or a PostgreSQL URL built from the DB_* settings."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return URL.create(
            "postgresql+psycopg2",
            username=self.DB_USER,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        ).render_as_string(hide_password=False)

    @property
    def use_memory_sessions(self) -> bool:
        return self.TESTING or self.SESSION_BACKEND.lower() == "memory"

    class Config:
        env_file = ".env"
        case_sensitive = True

# Create settings instance
settings = Settings()

"""
Application settings
Read from environment variables and an optional .env file
"""
from typing import List
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "InnSync"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Database
    DATABASE_URL: str = "sqlite:///./innsync.db"

    # JWT
    SECRET_KEY: str = "innsync-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # Login throttling (attempts per sliding window, in seconds)
    LOGIN_RATE_LIMIT_ATTEMPTS: int = 5
    LOGIN_RATE_LIMIT_WINDOW: int = 60

    # Business clock, hours east of UTC (WIB)
    TIMEZONE_OFFSET_HOURS: int = 7

    # Query cache lifetimes in seconds
    DASHBOARD_CACHE_TTL: int = 300
    KITCHEN_CACHE_TTL: int = 30

    # Outbound webhooks
    WEBHOOK_TIMEOUT: float = 10.0
    WEBHOOK_USER_AGENT: str = "InnSync-Webhook/1.0"

    model_config = ConfigDict(env_file=".env", case_sensitive=True)


# Global settings instance
settings = Settings()

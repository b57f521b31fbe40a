"""
Configuration management for the blog service
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Blog service configuration loaded from environment variables"""

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api/v1"
    BODY_LIMIT_BYTES: int = 1024 * 1024

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./blog.db"

    # Token Configuration
    JWT_SECRET: str = "change-this-secret-in-production-please"
    JWT_ALGORITHM: str = "HS256"
    # Tokens carry no expiry unless this is set
    JWT_EXPIRE_MINUTES: Optional[int] = None

    # Posts may be updated, published and deleted by any authenticated user
    # unless ownership is enforced
    ENFORCE_POST_OWNERSHIP: bool = False

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )


# Global settings instance
settings = Settings()

"""Application configuration."""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    
    # Database
    DATABASE_URL: str = "sqlite:///./lead_hunter.db"
    SQL_ECHO: bool = False
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    
    # Lead assignment
    # Roles offered as assignment targets in the sellers list
    SELLER_ROLES: List[str] = ["SELLER", "ADMIN", "SUPER_ADMIN"]
    
    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

"""
Application configuration settings.
Loads from environment variables (or a local .env file) with type checking.
"""

from pydantic import validator
from pydantic_settings import BaseSettings
from typing import Optional, List


class Settings(BaseSettings):
    # Application Metadata
    PROJECT_TITLE: str = "ProConnect API"
    PROJECT_DESCRIPTION: str = "Backend API for professional profiles, connections and messaging"
    PROJECT_VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"  # or 'testing', 'production'

    # Database Configuration
    DATABASE_URL: str
    TEST_DATABASE_URL: Optional[str] = None
    SQL_ECHO: bool = False

    # Authentication
    SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",")]
        return v

    @validator("ACCESS_TOKEN_EXPIRE_MINUTES")
    def validate_token_lifetime(cls, v):
        if v <= 0:
            raise ValueError("ACCESS_TOKEN_EXPIRE_MINUTES must be positive")
        return v

    @property
    def ASYNC_DATABASE_URL(self) -> str:
        """DATABASE_URL rewritten for the asyncpg driver when it is a plain postgres URL"""
        return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)

    @property
    def ASYNC_TEST_DATABASE_URL(self) -> Optional[str]:
        """Database the test suite runs against; None means an in-memory SQLite store"""
        if not self.TEST_DATABASE_URL:
            return None
        return self.TEST_DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


settings = Settings()

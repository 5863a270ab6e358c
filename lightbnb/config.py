"""
Configuration management using Pydantic settings.
Handles database URL, connection pool tuning and storage backend selection.
"""

from pydantic import validator
from pydantic_settings import BaseSettings
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application configuration
    app_name: str = "LightBnB"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    testing: bool = False
    log_level: str = "INFO"

    # Database configuration; built from the components below when not set
    database_url: Optional[str] = None

    postgres_db: str = "lightbnb"
    postgres_user: str = "vagrant"
    postgres_password: str = "123"
    postgres_host: str = "localhost"
    postgres_port: int = 5432

    # Connection pool settings
    pool_size: int = 10
    max_overflow: int = 20
    pool_pre_ping: bool = True
    pool_recycle: int = 3600
    pool_timeout: int = 30

    # Storage backend: "database" or "memory"
    storage_backend: str = "database"
    fixtures_dir: Optional[str] = None

    # Pagination defaults
    default_page_size: int = 10

    # bcrypt cost factor
    password_hash_rounds: int = 12

    @validator("database_url", pre=True)
    def validate_database_url(cls, v):
        """Ensure an async driver is used."""
        if v and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        if v and v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql+asyncpg://", 1)
        return v

    @validator("environment")
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @validator("storage_backend")
    def validate_storage_backend(cls, v):
        """Validate storage backend name."""
        allowed_backends = ["database", "memory"]
        if v not in allowed_backends:
            raise ValueError(f"Storage backend must be one of: {allowed_backends}")
        return v

    @validator("default_page_size", "pool_size")
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError("Value must be a positive integer")
        return v

    @validator("password_hash_rounds")
    def validate_hash_rounds(cls, v):
        """bcrypt accepts cost factors 4..31."""
        if not 4 <= v <= 31:
            raise ValueError("Password hash rounds must be between 4 and 31")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing" or self.testing

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def sqlalchemy_url(self) -> str:
        """Database URL, built from the individual components if not provided directly."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one instance of settings throughout the process lifecycle.
    """
    return Settings()

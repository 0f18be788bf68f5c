"""Application configuration using Pydantic settings."""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str

    # Runtime
    environment: str = "development"

    # Security
    secret_key: str  # Signs the session cookie
    admin_token: Optional[str] = None  # Writes are open when unset

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:3001"

    # Populate empty tables with sample categories and formulas on startup
    seed_sample_data: bool = False

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()

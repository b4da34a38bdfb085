from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite:///./chattu.db"
    create_tables: bool = False

    # Admin auth
    admin_secret_key: str = ""  # Login is impossible until this is set
    jwt_secret: str = "dev-secret-change-in-production"
    admin_session_minutes: int = 15

    # Cookie attributes
    cookie_secure: bool = False  # Set to True in production with HTTPS
    cookie_samesite: Optional[str] = None

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: List[str] = ["http://localhost:3000"]

    # Upper bound on concurrent per-record store queries
    admin_max_concurrency: int = 10

    @property
    def effective_samesite(self) -> str:
        """Cross-site cookies need SameSite=None, which browsers only accept with Secure."""
        if self.cookie_samesite:
            return self.cookie_samesite.lower()
        return "none" if self.cookie_secure else "lax"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

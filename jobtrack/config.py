"""
JobTrack - Application configuration.

Centralized configuration using Pydantic Settings for environment variable management.
Settings are loaded once at import time and are frozen afterwards; components
receive the pieces they need instead of reading the environment themselves.

Environment Variables:
    All settings can be overridden via environment variables with JOBTRACK_ prefix.

    Server Settings:
        JOBTRACK_DATABASE_URL=...           - SQLAlchemy connection string
        JOBTRACK_PORT=5000                  - Listen port for `python -m jobtrack`
        JOBTRACK_ALLOWED_ORIGINS=...        - Comma-separated client URLs allowed by CORS

    Auth Settings:
        JOBTRACK_SECRET_KEY=...             - JWT signing key (required in production)
        JOBTRACK_TOKEN_LIFETIME_MINUTES=... - Session token lifetime

    Client Settings:
        JOBTRACK_API_BASE_URL=...           - Base URL the terminal client talks to
"""
from pydantic_settings import BaseSettings
from typing import Optional


class AuthSettings(BaseSettings):
    """
    Authentication configuration settings.

    For production deployment:
        1. Generate a secret key: openssl rand -hex 32
        2. Set JOBTRACK_SECRET_KEY to the generated key
    """
    secret_key: str = "development-secret-key-change-in-production"
    algorithm: str = "HS256"
    token_lifetime_minutes: int = 30 * 24 * 60
    bcrypt_rounds: int = 10

    class Config:
        env_prefix = "JOBTRACK_"
        env_file = ".env"
        extra = "ignore"
        frozen = True


class ClientSettings(BaseSettings):
    """Terminal client configuration."""
    api_base_url: str = "http://localhost:5000/api/v1"
    token_file: str = "~/.jobtrack/token"
    prefs_file: str = "~/.jobtrack/prefs.json"

    class Config:
        env_prefix = "JOBTRACK_"
        env_file = ".env"
        extra = "ignore"
        frozen = True


class Settings(BaseSettings):
    """Combined application settings."""
    auth: AuthSettings = AuthSettings()
    client: ClientSettings = ClientSettings()

    # CORS allowed origins (comma-separated, e.g. "http://localhost:5173,https://myapp.com")
    allowed_origins: str = "http://localhost:5173,http://localhost:5174,http://localhost:5175"
    frontend_url: Optional[str] = None

    api_prefix: str = "/api/v1"
    port: int = 5000

    # Database
    database_url: str = "sqlite:///./data/jobtrack.db"

    # Database retry settings
    db_retry_max_attempts: int = 3
    db_retry_base_delay: float = 0.1

    # Rate limiting
    rate_limit_enabled: bool = True
    rate_limit_default: str = "100/15minutes"

    class Config:
        env_prefix = "JOBTRACK_"
        env_file = ".env"
        extra = "ignore"
        frozen = True

    def cors_origins(self) -> list:
        """Allowed origins plus the deployed frontend URL, if any."""
        origins = [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        if self.frontend_url and self.frontend_url not in origins:
            origins.append(self.frontend_url)
        return origins


# Global settings instance
settings = Settings()

"""Application settings and configuration."""

import sys

from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_JWT_DEFAULTS = {"change-me-in-production", "secret", "your_jwt_secret_key_here_at_least_32_characters"}


class Settings(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "taskreward"
    env: str = "development"
    log_level: str = "INFO"
    log_format: str = "console"  # console | json
    allowed_origins: str = "http://localhost:3000"

    # JWT
    jwt_secret_key: str = "change-me-in-production"
    jwt_expire_hours: int = 12

    # Database
    database_url: str = "sqlite:///./taskreward.db"

    # Referral
    refer_code_length: int = 15

    # Rate limits (slowapi syntax)
    default_rate_limit: str = "200/minute"
    register_rate_limit: str = "5/minute"
    login_rate_limit: str = "10/minute"

    # Settlement
    completion_timeout_seconds: float = 10.0


# Global settings instance
settings = Settings()

# ── Security validation ──────────────────────────────────────────────
if settings.env == "production":
    if settings.jwt_secret_key in _INSECURE_JWT_DEFAULTS or len(settings.jwt_secret_key) < 32:
        print(
            "\n❌  FATAL: JWT_SECRET_KEY is insecure or too short (min 32 chars).\n"
            "   Set a strong random value:  openssl rand -hex 32\n",
            file=sys.stderr,
        )
        sys.exit(1)

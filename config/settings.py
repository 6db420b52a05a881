"""
Application settings loaded from environment variables.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Security Secrets ──────────────────────────────────────────────────
    jwt_secret: str                      # HMAC secret for auth tokens (required)
    jwt_expiry_seconds: int = 3600       # 1 hour
    bcrypt_rounds: int = 10              # bcrypt work factor

    # ── Database ─────────────────────────────────────────────────────────
    database_url: str                    # e.g. postgresql+asyncpg://user:pw@host/accounts (required)

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 5000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]
    api_prefix: str = "/api"

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }


@lru_cache
def get_settings() -> Settings:
    """Load settings once; raises if ``JWT_SECRET`` or ``DATABASE_URL`` is missing."""
    return Settings()

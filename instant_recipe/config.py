"""Configuration management with pydantic-settings and validation."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


# Fields that must be present and non-empty
REQUIRED_FIELDS = {
    "anthropic_api_key",
    "database_url",
    "jwt_secret_key",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Anthropic Configuration
    anthropic_api_key: str
    generation_model: str = "claude-sonnet-4-5-20250929"
    suggestion_model: str = "claude-sonnet-4-5-20250929"
    generation_temperature: float = 0.8
    regeneration_temperature: float = 0.7
    suggestion_temperature: float = 0.7
    generation_max_tokens: int = 2048
    suggestion_max_tokens: int = 500
    llm_timeout_seconds: float = 60.0

    # Database Configuration
    database_url: str

    # Identity provider token verification
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"

    # Generation limits and history
    daily_generation_limit: int = 50
    recent_history_window: int = 20
    default_max_recent_recipes: int = 5
    user_timezone: str = "America/Denver"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    @field_validator("database_url", mode="before")
    @classmethod
    def fix_database_url(cls, v):
        """Hosted Postgres providers hand out postgres:// but SQLAlchemy requires postgresql://."""
        if isinstance(v, str) and v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator("*", mode="before")
    @classmethod
    def check_not_empty(cls, v, info):
        """Validate that required environment variables are not empty."""
        if info.field_name not in REQUIRED_FIELDS:
            return v
        if v is None:
            raise ValueError("Required environment variable is not set")
        if isinstance(v, str) and v.strip() == "":
            raise ValueError("Required environment variable is empty")
        return v


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings from environment.

    Raises:
        ValidationError: If required environment variables are missing or invalid.
    """
    return Settings()

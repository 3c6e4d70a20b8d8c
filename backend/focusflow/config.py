from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application Configuration
    secret_key: str = "your-secret-key-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    log_level: str = "INFO"

    # Database Configuration
    database_url: str = "sqlite:///./focusflow.db"

    # Checklist Configuration
    day_timezone: str = "Asia/Kolkata"  # "today" is computed in this zone
    heatmap_days: int = 365

    # Sandclock Configuration
    default_focus_minutes: int = 25
    max_focus_minutes: int = 240

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

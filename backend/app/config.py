"""
Application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # App
    app_name: str = "Tasktrack"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./data/tasktrack.db"

    # Auth (tokens are issued elsewhere, only verified here)
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    frontend_url: str = "http://localhost:3000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )


# Global settings instance
settings = Settings()

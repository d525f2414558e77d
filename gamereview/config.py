"""Application configuration."""
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from environment variables."""

    app_name: str = "Game Review Board API"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    sql_echo: bool = False
    api_v1_prefix: str = "/api/v1"
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173,http://localhost:8080"
    database_url: str = "sqlite:///./gamereview.db"  # Use DATABASE_URL env for PostgreSQL
    jwt_secret: str = "dev-secret-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 7

    # Moderation
    auto_approve_games: bool = False
    auto_approve_reviews: bool = False
    rating_scope: Literal["approved", "all"] = "approved"
    min_comment_length: int = 1
    batch_max_workers: int = 4

    # Admin dashboard
    recent_activity_limit: int = 10

    # Seeded on startup when a password is provided
    admin_email: str = "admin@gamereview.io"
    admin_username: str = "admin"
    admin_password: str = ""

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()

"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """Application settings, loaded once at startup and never mutated"""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./wedding_rsvp.db")
    USE_FIREBASE: bool = os.getenv("USE_FIREBASE", "false").lower() in ("1", "true", "yes")
    FIREBASE_CREDENTIALS_JSON: str | None = os.getenv("FIREBASE_CREDENTIALS_JSON")
    FIREBASE_CREDENTIALS_FILE: str | None = os.getenv("FIREBASE_CREDENTIALS_FILE")
    FIREBASE_CREDENTIALS_B64: str | None = os.getenv("FIREBASE_CREDENTIALS_B64")

    # Security
    ADMIN_TOKEN: str = os.getenv("ADMIN_TOKEN", "admin_token_123")
    WEBHOOK_SECRET: str | None = os.getenv("WEBHOOK_SECRET")

    # Site
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")
    SITE_NAME: str = os.getenv("SITE_NAME", "Our Wedding")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # File limits
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB

    # Rate limiting (guest lookup)
    RATE_LIMIT_PER_MINUTE: int = 30

    # Email notifications; without SMTP_HOST notifications are only logged
    SMTP_HOST: str | None = os.getenv("SMTP_HOST")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "465"))
    SMTP_USER: str | None = os.getenv("SMTP_USER")
    SMTP_PASSWORD: str | None = os.getenv("SMTP_PASSWORD")
    SMTP_TIMEOUT: float = 10.0
    MAIL_FROM_NAME: str = os.getenv("MAIL_FROM_NAME", "Wedding RSVP")
    NOTIFICATION_RECIPIENTS: List[str] = []

settings = Settings()

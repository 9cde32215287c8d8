from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

ROOT_DIR = Path(__file__).resolve().parents[2]
TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12
    SESSION_COOKIE_NAME: str = "helpdesk_session"
    SESSION_COOKIE_SECURE: bool = False

    NOTIFY_WEBHOOK_URL: str = ""
    REQUEST_TIMEOUT_SEC: float = 10.0

    STORAGE_DIR: str = str(ROOT_DIR / "storage")
    STORAGE_PUBLIC_URL: str = "/storage"
    IMAGE_BUCKET: str = "ticket-images"
    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024

    AGENT_UPDATE_REQUIRES_ASSIGNMENT: bool = False


settings = Settings()

from pathlib import Path
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repo root

ENV_FILE = os.getenv("ENV_FILE", str(BASE_DIR / ".env"))

DEVELOPMENT_ENVS = {"local", "development", "dev"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILE, extra="ignore")

    APP_ENV: str = "local"
    DATABASE_URL: str
    CORS_ORIGINS: str = "*"  # Comma-separated list of allowed origins, or "*" for all
    LOG_LEVEL: str = "INFO"

    # Connection pool (ignored by SQLite)
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: float = 30.0

    # Local wall clock used for "today", birthday months and the daily trigger
    TIMEZONE: str = "Asia/Kolkata"

    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 500

    # WhatsApp gateway
    WHATSAPP_API_URL: str = "https://realtimegoverance.ap.gov.in:8000/api/v1/templates/direct-send"
    WHATSAPP_DEPARTMENT: str = "CDMA"
    WHATSAPP_TIMEOUT_SECONDS: float = 15.0

    # Birthday job
    BIRTHDAY_MESSAGE_DELAY_SECONDS: float = 0.5
    BIRTHDAY_SCHEDULER_ENABLED: bool = False
    BIRTHDAY_SEND_TIME: str = "09:00"  # HH:MM, local time

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list, handling '*' for development"""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def is_development(self) -> bool:
        return self.APP_ENV.lower() in DEVELOPMENT_ENVS

    @property
    def birthday_send_time(self) -> tuple[int, int]:
        """BIRTHDAY_SEND_TIME as (hour, minute)"""
        hour, _, minute = self.BIRTHDAY_SEND_TIME.partition(":")
        return int(hour), int(minute or 0)


settings = Settings()

"""
Application-wide settings using pydantic-settings.
All runtime env access in pharmnote/ should go through this module.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[2]
ENV_PATH = PROJECT_ROOT / ".env"

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-preview-09-2025"


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    LOG_DIR: str = "./logs"
    LOG_FILE_NAME: str = "pharmnote.debug.log"
    LOG_FILE_WHEN: str = "midnight"
    LOG_FILE_INTERVAL: int = 1
    LOG_FILE_BACKUP_COUNT: int = 7
    LOG_FILE_ENCODING: str = "utf-8"
    LOG_FILE_LEVEL: str = "DEBUG"
    LOG_TRUNCATE: int = 600

    # Generative model
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = DEFAULT_GEMINI_MODEL
    GEMINI_TEMPERATURE: float | None = None

    # Caller authentication
    FIREBASE_PROJECT_ID: str = ""
    AUTH_CHECK_REVOKED: bool = False

    # HTTP
    CORS_ALLOW_ORIGINS: str = "*"

    model_config = SettingsConfigDict(
        env_file=ENV_PATH,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    def has_gemini_creds(self) -> bool:
        return bool((self.GEMINI_API_KEY or "").strip())

    def cors_origins(self) -> list[str]:
        origins = [o.strip() for o in (self.CORS_ALLOW_ORIGINS or "").split(",")]
        return [o for o in origins if o] or ["*"]


settings = Settings()

from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

APP_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./alignment_quiz.db"

    # Question bank + delegate profiles, validated at startup
    QUIZ_CONFIG_PATH: str = str(APP_DIR / "data" / "alignment_quiz.json")

    # Storage slot holding the serialized quiz history
    HISTORY_STORAGE_KEY: str = "quizHistory"

    REPORTS_DIR: str = "reports"

    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",  # frontend
        "http://127.0.0.1:5173",
    ]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()

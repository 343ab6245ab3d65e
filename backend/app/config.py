"""Application configuration loaded from environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings

DATA_DIR = Path(__file__).parent / "data"


class Settings(BaseSettings):
    # Storage
    DIALOGUE_FILE: str = str(DATA_DIR / "dialogue.json")

    # App
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    HOST: str = "127.0.0.1"
    PORT: int = 3001
    CORS_ORIGINS: list[str] = ["*"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()

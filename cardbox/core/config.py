from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Base
    APP_ENV: str = "dev"  # dev | staging | prod
    APP_NAME: str = "Cardbox API"
    APP_VERSION: str = "0.1.0"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Security
    API_KEY: str = "change_me"

    # Storage
    STORAGE_PATH: str = "./storage"
    LOAD_ON_START: bool = True

    # Quiz
    QUIZ_SESSION_TTL: int = 60 * 60  # seconds

    # Logging
    LOG_LEVEL: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()

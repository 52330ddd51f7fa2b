from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal


class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "Jokebook API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    API_PREFIX: str = "/jokebook"

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./jokebook.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600  # 1 hour
    DB_ECHO: bool = False

    # Store
    STORE_BACKEND: Literal["database", "memory"] = "database"
    AUTO_CREATE_SCHEMA: bool = True
    SEED_DEFAULT_CATEGORIES: bool = True
    DEFAULT_CATEGORIES: List[str] = ["Funny Joke", "Lame Joke", "Tech Joke"]
    MAX_JOKES_PER_PAGE: int = 100

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True
    LOG_JSON: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()

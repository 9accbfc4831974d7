#config.py
import os
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict
from typing import Optional
from functools import lru_cache

STORE_BACKENDS = ("memory", "sql", "redis")

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")
    # Application Settings
    APP_NAME: str = "LDN Inbox API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = int(os.environ.get("PORT", 8000))

    # Storage Settings
    STORE_BACKEND: str = "sql"  # memory | sql | redis
    DATABASE_URL: str = "sqlite:///./inbox.db"
    REDIS_URL: Optional[str] = None
    REDIS_PREFIX: str = "ldn:"

    # Inbox Settings
    MAX_INBOX_RESPONSE_SIZE: int = 128
    # Overrides http://{Host header} when building public URIs
    PUBLIC_BASE_URL: Optional[str] = None

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @property
    def store_backend(self) -> str:
        backend = self.STORE_BACKEND.strip().lower()
        if backend not in STORE_BACKENDS:
            raise ValueError(f"Unknown STORE_BACKEND {self.STORE_BACKEND!r}; expected one of {STORE_BACKENDS}")
        return backend

@lru_cache()
def get_settings() -> Settings:
    return Settings()

import json
from functools import lru_cache
from typing import Annotated, List

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "EventDesk"
    VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./eventdesk.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 0
    DB_POOL_TIMEOUT: int = 30

    # Security
    SECRET_KEY: SecretStr = SecretStr("dev-secret-key-change-me")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Redis (booking locks)
    REDIS_URL: str = "redis://localhost:6379/0"

    # Image uploads
    UPLOAD_DIR: str = "uploads"
    PUBLIC_BASE_URL: str | None = None
    PLACEHOLDER_IMAGE_URL: str = "https://via.placeholder.com/300"
    ALLOWED_IMAGE_EXTENSIONS: Annotated[List[str], NoDecode] = ["png", "jpg", "jpeg", "gif", "webp"]

    # Events
    REQUIRE_ORGANIZER_ROLE_FOR_CREATE: bool = False

    # CORS
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = ["*"]

    @field_validator("BACKEND_CORS_ORIGINS", "ALLOWED_IMAGE_EXTENSIONS", mode="before")
    @classmethod
    def split_comma_separated(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str):
            if v.startswith("["):
                return json.loads(v)
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

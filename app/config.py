from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Chatty API"
    # NODE_ENV is still honoured so existing deploy configs keep working
    APP_ENV: str = Field(
        default="development",
        validation_alias=AliasChoices("APP_ENV", "NODE_ENV"),
    )
    PORT: int = 5001
    LOG_LEVEL: str = "INFO"

    # Origins allowed to make credentialed requests (DEV_ORIGINS as a JSON list in .env)
    DEV_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:5174"]
    )
    FRONTEND_URL: Optional[str] = None
    DEPLOYED_ORIGIN: Optional[str] = "https://chatty-liart.vercel.app"

    # Prebuilt front-end bundle, served in production only
    FRONTEND_DIST: str = "../frontend/dist"

    # Mongo
    MONGODB_URI: Optional[str] = None
    MONGODB_DATABASE: str = "chatty"

    # Limits
    RATE_LIMIT_DEFAULT: str = "300/minute"

    # Meta
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.strip().lower() == "production"

    def origin_sources(self) -> List[Optional[str]]:
        """Raw allow-list entries in precedence order, before filtering."""
        return [*self.DEV_ORIGINS, self.FRONTEND_URL, self.DEPLOYED_ORIGIN]


@lru_cache
def get_settings() -> Settings:
    return Settings()

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECT_ROOT = Path(__file__).resolve().parents[2]
ENV_PATH = PROJECT_ROOT / ".env"


def load_environment() -> None:
    """Load environment variables from the project .env file if it exists."""
    load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    api_base_url: str = Field("https://api.github.com", validation_alias="GITHUB_API_BASE_URL")
    cache_ttl_seconds: float = Field(300.0, gt=0, validation_alias="CACHE_TTL_SECONDS")
    per_page: int = Field(30, ge=1, le=100, validation_alias="LIST_PER_PAGE")
    search_per_page: int = Field(30, ge=1, le=100, validation_alias="SEARCH_PER_PAGE")
    search_debounce_seconds: float = Field(0.3, ge=0.0, validation_alias="SEARCH_DEBOUNCE_SECONDS")
    request_timeout_seconds: float = Field(10.0, gt=0, validation_alias="REQUEST_TIMEOUT_SECONDS")
    user_agent: str = Field("github-finder", validation_alias="GITHUB_USER_AGENT")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    @field_validator("api_base_url")
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("log_level")
    def normalize_level(cls, value: str) -> str:
        return value.strip().upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_environment()
    return Settings()


__all__ = ["Settings", "get_settings", "load_environment", "PROJECT_ROOT"]

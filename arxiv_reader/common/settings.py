from functools import cached_property, lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_ENV_FILE = PROJECT_ROOT / "env" / ".env.local"


def _make_settings_config(env_prefix: str = "") -> SettingsConfigDict:
    """Factory for creating SettingsConfigDict."""
    return SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix=env_prefix,
    )


class ArxivSettings(BaseSettings):
    """arXiv feed endpoint and parsing settings."""

    model_config = _make_settings_config("ARXIV_")

    api_url: str = "https://export.arxiv.org/api/query"
    user_agent: str = "arxiv-reader/1.0"
    timeout_seconds: float = Field(default=30.0, gt=0)

    max_results: int = Field(default=10, ge=1, le=2000)
    sort_by: Literal["lastUpdatedDate", "submittedDate"] = "lastUpdatedDate"
    default_category: str = "latest"

    normalize_whitespace: bool = True
    empty_authors_placeholder: str = "Unknown"

    auto_refresh: bool = False
    refresh_interval_minutes: int = Field(default=30, ge=1)

    @property
    def refresh_interval_seconds(self) -> float:
        return self.refresh_interval_minutes * 60.0


class AppSettings(BaseSettings):
    """Application settings."""

    model_config = _make_settings_config()

    env: Literal["dev", "prod"] = "dev"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool = False

    @cached_property
    def arxiv(self) -> ArxivSettings:
        return ArxivSettings()

    @property
    def is_production(self) -> bool:
        return self.env == "prod"


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()  # pyright: ignore[reportCallIssue]

"""Configuration for the Diff Dragon review service."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    environment: str = Field(default="development")
    debug: bool = Field(default=True)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)

    # LLM - OpenRouter (multi-provider gateway)
    openrouter_api_key: Optional[str] = Field(default=None)
    review_model: str = Field(default="claude-sonnet-4")
    analysis_timeout: float = Field(default=300.0, description="Seconds before an analysis run is abandoned")

    # GitHub App Authentication
    github_app_id: Optional[str] = Field(default=None)
    github_private_key: Optional[str] = Field(default=None)
    github_private_key_path: Optional[str] = Field(default=None)
    github_webhook_secret: Optional[str] = Field(default=None)
    github_timeout: int = Field(default=30, description="Per-request timeout for GitHub API calls")
    check_run_name: str = Field(default="Diff Dragon")

    # Review ledger
    database_url: str = Field(default="sqlite+aiosqlite:///./diff_dragon.db")


settings = Settings()

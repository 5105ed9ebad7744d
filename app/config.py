"""Application configuration management."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_APP_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Centralised application settings derived from environment variables."""

    anthropic_api_key: str | None = Field(
        default=None,
        description="Anthropic API key. Analysis endpoints refuse to run without it.",
    )
    anthropic_model: str = Field(default="claude-sonnet-4-5-20250929")
    ai_max_tokens: int = Field(default=2048, ge=1)
    data_analysis_temperature: float = Field(default=0.3, ge=0.0, le=1.0)
    insights_temperature: float = Field(default=0.7, ge=0.0, le=1.0)

    database_url: str = Field(
        default="sqlite:///./data/practice.db",
        description="SQLAlchemy-compatible database URL.",
    )
    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=8000, ge=1, le=65535)

    debug: bool = Field(default=False)

    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("logs"))

    pedagogy_config_path: Path = Field(
        default=_APP_DIR / "prompts" / "pedagogy.yaml",
        description="YAML file with pedagogical guidance injected into prompts.",
    )
    default_session_limit: int = Field(default=30, ge=1, le=100)
    summary_threshold: int = Field(default=15, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("anthropic_api_key")
    @classmethod
    def blank_key_is_missing(cls, value: str | None) -> str | None:
        """Treat empty or placeholder keys as not configured."""

        if value is None or value.strip().lower() in {"", "change-me", "changeme"}:
            return None
        return value.strip()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        upper = value.upper()
        if upper not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(sorted(valid))}")
        return upper


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance so it can be reused across the app."""

    settings = Settings()
    settings.log_dir.mkdir(parents=True, exist_ok=True)
    return settings

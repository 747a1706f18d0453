"""Application settings loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

from healthnlu.ontology.thresholds import ConfidenceThresholds


class Settings(BaseSettings):
    model_config = {"env_prefix": "HEALTHNLU_"}

    openai_api_key: str | None = Field(
        default=None, description="OpenAI API key; fallback disabled when unset"
    )
    openai_model: str = Field(default="gpt-4o-mini", description="Fallback model name")
    fallback_timeout_ms: int = Field(default=800, gt=0, description="Fallback hard timeout")
    fallback_cache_size: int = Field(default=500, gt=0)
    fallback_cache_ttl_seconds: float = Field(default=3 * 24 * 3600, gt=0)
    timezone: str = Field(default="America/Los_Angeles", description="Default caller timezone")
    db_path: Path = Field(
        default=Path.home() / ".healthnlu" / "healthnlu.db",
        description="SQLite database path",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    strict_threshold: float = Field(default=0.80, ge=0.0, le=1.0)
    lenient_threshold: float = Field(default=0.72, ge=0.0, le=1.0)
    rescue_threshold: float = Field(default=0.65, ge=0.0, le=1.0)
    reject_threshold: float = Field(default=0.50, ge=0.0, le=1.0)
    spell_threshold: float = Field(default=0.88, ge=0.0, le=1.0)
    spell_protected_threshold: float = Field(default=0.94, ge=0.0, le=1.0)

    pending_ttl_seconds: float = Field(default=120.0, gt=0)
    soft_extend_min_remaining_seconds: float = Field(default=10.0, ge=0)
    soft_extend_by_seconds: float = Field(default=60.0, ge=0)
    sweep_interval_seconds: float = Field(default=30.0, gt=0)

    def thresholds(self) -> ConfidenceThresholds:
        return ConfidenceThresholds(
            strict=self.strict_threshold,
            lenient=self.lenient_threshold,
            rescue=self.rescue_threshold,
            reject=self.reject_threshold,
            spell=self.spell_threshold,
            spell_protected=self.spell_protected_threshold,
        )

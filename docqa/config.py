"""Typed settings configuration - single source of truth."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite+aiosqlite:///./docqa.db"

    # Reasoning service (any OpenAI-compatible chat completions gateway)
    llm_api_key: SecretStr | None = None
    llm_base_url: str = "https://ai.gateway.lovable.dev/v1"
    llm_model: str = "google/gemini-2.5-flash"
    llm_timeout_seconds: float = 30.0

    # Chunking and ranking
    chunk_size: int = Field(1000, gt=0)
    top_k: int = Field(3, gt=0)
    ranker_scorer: Literal["substring", "token_overlap"] = "substring"

    # Synthesis fallback
    evidence_preview_chars: int = Field(200, gt=0)
    fallback_confidence: int = Field(75, ge=0, le=100)

    # Ingestion
    min_content_chars: int = Field(10, ge=1)

    # Audit policy: persist a stub exchange when synthesis fails
    record_failed_exchanges: bool = False


class PipelineConfig(BaseModel):
    """Explicit pipeline configuration handed to each component at construction."""

    model_config = ConfigDict(frozen=True)

    chunk_size: int = Field(1000, gt=0)
    top_k: int = Field(3, gt=0)
    ranker_scorer: Literal["substring", "token_overlap"] = "substring"
    llm_timeout_seconds: float = Field(30.0, gt=0)
    evidence_preview_chars: int = Field(200, gt=0)
    fallback_confidence: int = Field(75, ge=0, le=100)
    min_content_chars: int = Field(10, ge=1)
    record_failed_exchanges: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "PipelineConfig":
        """Project the pipeline subset out of application settings."""
        return cls(
            chunk_size=settings.chunk_size,
            top_k=settings.top_k,
            ranker_scorer=settings.ranker_scorer,
            llm_timeout_seconds=settings.llm_timeout_seconds,
            evidence_preview_chars=settings.evidence_preview_chars,
            fallback_confidence=settings.fallback_confidence,
            min_content_chars=settings.min_content_chars,
            record_failed_exchanges=settings.record_failed_exchanges,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

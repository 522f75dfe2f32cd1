"""Configuration management for the advisor document context engine."""

from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MEGABYTE = 1024 * 1024


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Upload validation
    max_upload_bytes: int = 50 * MEGABYTE

    # Chunking
    chunk_size: int = 1000
    chunk_overlap: int = 100

    # Context assembly
    max_context_tokens: int = 8000
    min_relevance_score: float = 0.1
    min_truncation_tokens: int = 100
    suggestion_threshold: float = 0.3

    # Extraction
    extraction_timeout_seconds: float = 60.0

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    log_file: Path | None = None
    debug: bool = False

    @field_validator("max_upload_bytes", "chunk_size", "max_context_tokens")
    @classmethod
    def must_be_positive(cls, value: int) -> int:
        """Reject zero or negative sizes."""
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value

    @field_validator("chunk_overlap", "min_truncation_tokens")
    @classmethod
    def must_be_non_negative(cls, value: int) -> int:
        """Reject negative counts."""
        if value < 0:
            raise ValueError("must not be negative")
        return value

    @field_validator("min_relevance_score", "suggestion_threshold")
    @classmethod
    def must_be_unit_interval(cls, value: float) -> float:
        """Scores live in [0, 1]."""
        if not 0.0 <= value <= 1.0:
            raise ValueError("must be between 0 and 1")
        return value

    @field_validator("extraction_timeout_seconds")
    @classmethod
    def timeout_must_be_positive(cls, value: float) -> float:
        """A zero timeout would fail every extraction."""
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    @field_validator("log_level", mode="after")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Store log levels upper-cased."""
        return value.strip().upper()

    @model_validator(mode="after")
    def overlap_below_chunk_size(self) -> "Settings":
        """Overlap must leave room for new content in every chunk."""
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be less than chunk_size")
        return self

    @property
    def max_upload_megabytes(self) -> float:
        """Upload limit expressed in megabytes, for messages."""
        return self.max_upload_bytes / MEGABYTE


# Global settings instance
settings = Settings()

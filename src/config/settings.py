# src/config/settings.py — v2
"""Typed configuration loaded from environment / .env via pydantic-settings.

Built once per build invocation and passed explicitly into the pipeline;
nothing below the CLI reads the environment on its own.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bodyforge.core.errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.openai.com/v1"
FALLBACK_CACHE_DIR = Path("build/bodyforge/bodyforge_cache")
CACHE_DIR_NAME = "bodyforge_cache"


class Settings(BaseSettings):
    """Application settings loaded from the environment and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Generative backend ===
    llm_provider: str = "openai"
    llm_api_key: str = ""
    llm_base_url: str = DEFAULT_BASE_URL
    llm_model: str = ""
    llm_timeout_s: float = 120.0
    llm_temperature: float = 0.0
    llm_max_tokens: int = 4096
    llm_strict_schema: bool = False

    # === Network mode ===
    llm_offline: bool = False
    llm_no_network: bool = False

    # === Cache ===
    cache_backend: Literal["file", "sqlite"] = "file"
    cache_dir: Path | None = None
    out_dir: Path | None = None

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("llm_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError("llm_timeout_s must be > 0")
        return v

    @field_validator("llm_base_url")
    @classmethod
    def strip_base_url(cls, v: str) -> str:  # noqa: N805
        return v.strip().rstrip("/") or DEFAULT_BASE_URL

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.llm_max_tokens <= 0:
            errors.append("LLM_MAX_TOKENS must be > 0")

        if self.log_retention < 0:
            errors.append("LOG_RETENTION must be >= 0")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def resolved_cache_dir(self) -> Path:
        """Cache directory: CACHE_DIR, else $OUT_DIR/bodyforge_cache, else fallback."""
        if self.cache_dir is not None:
            return self.cache_dir.expanduser()
        if self.out_dir is not None:
            return self.out_dir.expanduser() / CACHE_DIR_NAME
        return FALLBACK_CACHE_DIR


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment with optional overrides.

    Args:
        **overrides: Field-level overrides (CLI flags, tests).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]

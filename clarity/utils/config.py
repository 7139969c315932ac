"""Type-safe environment configuration using Pydantic Settings."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables.

    Every field has a default so the client runs without a .env file.
    List fields (DISCOVERY_TERMS) are read from the environment as JSON.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields in .env
        env_ignore_empty=True,
    )

    APP_NAME: str = Field(
        default="clarity",
        description="Application name"
    )

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )

    DEBUG: bool = Field(
        default=False,
        description="Debug mode flag"
    )

    # Browsing and search defaults
    DEFAULT_CATEGORY: str = Field(
        default="cs.AI",
        description="Category selected when a session starts",
        min_length=1
    )

    LATEST_MAX_RESULTS: int = Field(
        default=20,
        description="Number of papers in the 'latest in category' listing",
        ge=1,
        le=100
    )

    SEARCH_MAX_RESULTS: int = Field(
        default=50,
        description="Number of papers returned by a free-text search",
        ge=1,
        le=100
    )

    # arxiv.Client tuning
    ARXIV_PAGE_SIZE: int = Field(
        default=100,
        description="Results requested per arXiv API page",
        gt=0
    )

    ARXIV_DELAY_SECONDS: float = Field(
        default=3.0,
        description="Delay between consecutive arXiv API page requests",
        ge=0
    )

    ARXIV_NUM_RETRIES: int = Field(
        default=0,
        description="Retries performed by arxiv.Client before an error surfaces",
        ge=0
    )

    DISCOVERY_TERMS: list[str] = Field(
        default_factory=lambda: [
            "large language models",
            "diffusion models",
            "reinforcement learning",
            "graph neural networks",
            "quantum computing",
            "computer vision",
            "causal inference",
            "federated learning",
        ],
        description="Terms the discovery feed picks from when nothing is searched",
        min_length=1
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of {valid_levels}, got '{v}'"
            )
        return v_upper

    @field_validator("DISCOVERY_TERMS")
    @classmethod
    def strip_discovery_terms(cls, v: list[str]) -> list[str]:
        """Drop blank discovery terms and surrounding whitespace."""
        terms = [term.strip() for term in v if term and term.strip()]
        if not terms:
            raise ValueError("DISCOVERY_TERMS must contain at least one non-blank term")
        return terms


# Singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Loads settings from environment variables and .env file on first call.
    Subsequent calls return the cached instance.

    Returns:
        Settings: The application settings instance

    Raises:
        ValidationError: If environment variables hold invalid values
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton. Useful for testing."""
    global _settings
    _settings = None

"""Configuration for the aggregation engine.

Uses Pydantic settings for environment-based configuration,
following the same pattern as other service configs in the project.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AggregationConfig(BaseSettings):
    """
    Configuration for trending ranking and popularity tallies.

    All settings can be overridden via environment variables with AGGREGATION_ prefix.
    Example: AGGREGATION_DEFAULT_LIMIT=12

    Attributes:
        default_limit: Top-N size when the caller passes no limit.
        trending_limit: Per-type cap on the weekly trending board (None = all).
        calendar_preview_size: Releases shown per calendar day before "more".
    """

    model_config = SettingsConfigDict(
        env_prefix="AGGREGATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Default top-N for most-watchlisted and most-searched.",
    )
    trending_limit: int | None = Field(
        default=None,
        ge=1,
        description="Per-type cap on weekly trending groups (unset = no cap).",
    )
    calendar_preview_size: int = Field(
        default=3,
        ge=1,
        description="Releases listed per day in calendar output.",
    )

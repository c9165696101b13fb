"""Configuration for the catalog data-access layer."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CatalogConfig(BaseSettings):
    """Settings for catalog queries and the in-memory lookup cache.

    All settings can be overridden via environment variables with CATALOG_ prefix.
    Example: CATALOG_CACHE_TTL_SECONDS=60
    """

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    cache_ttl_seconds: int = Field(
        default=300,
        ge=0,
        description="TTL for in-memory lookup caches (0 = no caching)",
    )
    cache_max_entries: int = Field(
        default=256,
        ge=1,
        description="Maximum keys held by a single cache before oldest-first eviction",
    )
    max_query_length: int = Field(
        default=200,
        ge=1,
        description="Search queries longer than this are truncated before storage",
    )

from __future__ import annotations

from typing import List, Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from blogsearch.exceptions import ConfigError


class AppConfig(BaseModel):
    """Application-specific configuration values."""

    name: str = "blogsearch"
    env: str = "development"
    log_level: str = "INFO"
    # Transport settings for FastMCP: "stdio" (default), "http", or "sse"
    transport: Literal["stdio", "http", "sse"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000


class SiteConfig(BaseModel):
    """Where the blog lives and how its posts are fetched."""

    # Relative manifest URLs need base_url; load_settings() enforces it
    manifest_url: str = "assets/post-list.json"
    # Base used to resolve the manifest and relative post URLs
    base_url: Optional[str] = None
    timeout: float = 20.0
    concurrency: int = Field(default=8, ge=1)
    user_agent: str = "blogsearch-indexer/0.1"


class LayoutConfig(BaseModel):
    """Selectors describing the rendered post layout."""

    content_id: str = "content"
    title_selector: str = ".post-title a"
    # Non-prose blocks removed before the text is flattened
    prune_selectors: List[str] = [
        ".post-date",
        ".post-title",
        "#table-of-contents",
        ".taglist",
        "#postamble",
    ]


class Settings(BaseSettings):
    """Top-level settings loaded from environment variables and .env only."""

    model_config = SettingsConfigDict(
        env_prefix="BLOGSEARCH_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    app: AppConfig = AppConfig()
    site: SiteConfig = SiteConfig()
    layout: LayoutConfig = LayoutConfig()


def load_settings() -> Settings:
    """Load settings from environment variables and .env only."""
    try:
        settings = Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise ConfigError(f"Invalid blogsearch settings: {exc}") from exc

    site = settings.site
    if site.base_url is None and not urlparse(site.manifest_url).scheme:
        raise ConfigError(
            f"Manifest URL {site.manifest_url!r} is relative. Set BLOGSEARCH_SITE__BASE_URL."
        )
    return settings

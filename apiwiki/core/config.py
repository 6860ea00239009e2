#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Application configuration.

All values can be overridden via environment variables or a .env file.
The resolver itself never reads Settings directly: it receives an immutable
ResolverConfig built from them at construction time.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from apiwiki._version import __version__ as _pkg_version


# -----------------------------------------------------------------------------

class ResolverConfig(BaseModel):
    """Frozen options shared by every resolver created from one Settings."""

    model_config = ConfigDict(frozen=True)

    image_directory: Path = Path("./data/images")
    image_base_url: str | None = "${image}"
    link_base_url: str = "${title}"
    replace_colon: bool = False
    recursion_limit: int = 32
    default_thumb_width: int = 220
    site_name: str = "apiwiki"
    template_namespaces: tuple[str, ...] = ("Template",)
    allowed_attributes: frozenset[str] = frozenset({
        "href", "src", "alt", "title", "class", "width", "height", "style",
    })


# -----------------------------------------------------------------------------

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ────────────────────────────────────────────────────────

    app_name: str = "apiwiki"
    app_version: str = _pkg_version
    log_level: str = "INFO"

    # ── Database ───────────────────────────────────────────────────────────

    database_url: str = "sqlite+aiosqlite:///./apiwiki.db"
    db_echo: bool = False
    db_pool_size: int = 5
    db_max_overflow: int = 10

    # ── Remote wiki ────────────────────────────────────────────────────────

    wiki_api_url: str = "https://en.wikipedia.org/w/api.php"
    wiki_username: str | None = None
    wiki_password: str | None = None
    user_agent: str = f"apiwiki/{_pkg_version} (+https://github.com/apiwiki)"
    fetch_timeout: float = 15.0

    # ── Storage ────────────────────────────────────────────────────────────

    image_directory: Path = Path("./data/images")

    # ── Rendering ──────────────────────────────────────────────────────────

    image_base_url: str | None = "/api/v1/images/files/${image}"
    link_base_url: str = "/wiki/${title}"
    replace_colon: bool = False
    recursion_limit: int = 32
    default_thumb_width: int = 220
    site_name: str = "apiwiki"

    def resolver_config(self) -> ResolverConfig:
        return ResolverConfig(
            image_directory=self.image_directory,
            image_base_url=self.image_base_url,
            link_base_url=self.link_base_url,
            replace_colon=self.replace_colon,
            recursion_limit=self.recursion_limit,
            default_thumb_width=self.default_thumb_width,
            site_name=self.site_name,
        )


# -----------------------------------------------------------------------------

@lru_cache
def get_settings() -> Settings:
    return Settings()


# -----------------------------------------------------------------------------

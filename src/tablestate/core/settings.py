"""Environment-driven defaults for tablestate.

``TableSettings`` holds the process-wide defaults a table falls back to when
the caller does not pass an explicit value: page size, URL write debounce and
logging setup. Values come from ``TABLESTATE_*`` environment variables or a
``.env`` file.

Examples:
    >>> from tablestate.core.settings import get_settings
    >>> get_settings().default_page_size
    10

Tags:
    settings, configuration, pydantic, environment, tablestate
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TableSettings(BaseSettings):
    """Defaults shared by every table instance.

    Fields
    ──────
    default_page_size : Page size used when a table is built without one
    url_debounce_ms   : Quiet interval before a URL write fires
    log_level         : structlog log level for the CLI
    log_format        : ``console`` or ``json``
    """

    model_config = SettingsConfigDict(
        env_prefix="TABLESTATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Pipeline ─────────────────────────────────────────────────
    default_page_size: int = Field(default=10, gt=0)

    # ── URL sync ─────────────────────────────────────────────────
    url_debounce_ms: int = Field(default=300, ge=0)

    # ── Observability ────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")


@lru_cache(maxsize=1)
def get_settings() -> TableSettings:
    """Return the cached settings singleton."""
    return TableSettings()


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()


__all__ = ["TableSettings", "get_settings", "reset_settings"]

"""Centralized application settings loaded from environment variables.

All configuration is defined once here. Other modules should import
``get_settings()`` rather than calling ``os.getenv()`` directly.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide configuration backed by environment variables.

    Field names are **lowercased** versions of the env-var names.
    ``pydantic-settings`` maps them automatically (case-insensitive).

    Example::

        settings = Settings()  # reads .env + real env
        endpoint = settings.azure_ai_project_endpoint
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -- Azure AI / Foundry ------------------------------------------------

    azure_ai_project_endpoint: str = ""
    """Foundry project endpoint URL. Empty disables model-backed translation."""

    azure_ai_model_deployment_name: str = "gpt-4o-mini"
    """Default model deployment."""

    azure_ai_translator_model: str | None = None
    """Model override for the query translator. Falls back to default."""

    azure_client_id: str | None = None
    """Managed-identity client ID (None → system-assigned)."""

    # -- Azure SQL ---------------------------------------------------------

    azure_sql_server: str = ""
    """SQL Server hostname of the article store."""

    azure_sql_database: str = "NewsCorpus"
    """Target database name."""

    # -- Query pipeline ----------------------------------------------------

    schema_path: str | None = None
    """Alternative GraphQL SDL file (None → bundled ``config/schema.graphql``)."""

    enable_model_translation: bool = True
    """Use the LLM translator before the keyword fallback."""

    trending_window_days: int = 7
    """Look-back window (days) for trending articles."""

    # -- Operational -------------------------------------------------------

    cors_allowed_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )
    """Origins allowed by the CORS middleware."""


def get_settings() -> Settings:
    """Return a cached ``Settings`` instance.

    Uses ``lru_cache`` semantics via a module-level singleton so the
    ``.env`` file is read at most once per process.

    Returns:
        The global ``Settings`` object.
    """
    return _settings


_settings = Settings()

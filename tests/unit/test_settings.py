"""Unit tests for environment-backed settings."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from config.settings import Settings
from entities.model_translator import load_prompt
from entities.nl_query import clients as clients_module
from entities.nl_query.clients import (
    TRANSLATOR_AGENT_NAME,
    create_translator_agent_from_settings,
)


class TestSettings:
    """Defaults and environment overrides."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("AZURE_AI_PROJECT_ENDPOINT", raising=False)
        monkeypatch.delenv("TRENDING_WINDOW_DAYS", raising=False)
        monkeypatch.delenv("ENABLE_MODEL_TRANSLATION", raising=False)
        monkeypatch.delenv("SCHEMA_PATH", raising=False)
        settings = Settings(_env_file=None)

        assert settings.azure_ai_project_endpoint == ""
        assert settings.enable_model_translation is True
        assert settings.trending_window_days == 7
        assert settings.schema_path is None

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENABLE_MODEL_TRANSLATION", "false")
        monkeypatch.setenv("TRENDING_WINDOW_DAYS", "14")
        monkeypatch.setenv("CORS_ALLOWED_ORIGINS", '["https://news.example.com"]')
        settings = Settings(_env_file=None)

        assert settings.enable_model_translation is False
        assert settings.trending_window_days == 14
        assert settings.cors_allowed_origins == ["https://news.example.com"]

    def test_translation_disabled_yields_no_agent(self, test_settings: Settings) -> None:
        disabled = test_settings.model_copy(update={"enable_model_translation": False})
        assert create_translator_agent_from_settings(disabled) is None

    def test_missing_endpoint_yields_no_agent(self, test_settings: Settings) -> None:
        unset = test_settings.model_copy(update={"azure_ai_project_endpoint": ""})
        assert create_translator_agent_from_settings(unset) is None

    def test_configured_endpoint_builds_named_agent(
        self, test_settings: Settings, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(clients_module, "DefaultAzureCredential", MagicMock())
        azure_client = MagicMock()
        monkeypatch.setattr(clients_module, "AzureAIClient", azure_client)
        chat_agent = MagicMock()
        monkeypatch.setattr(clients_module, "ChatAgent", chat_agent)

        agent = create_translator_agent_from_settings(test_settings)

        assert agent is chat_agent.return_value
        kwargs = chat_agent.call_args.kwargs
        assert kwargs["name"] == TRANSLATOR_AGENT_NAME
        assert kwargs["instructions"] == load_prompt()
        assert kwargs["chat_client"] is azure_client.return_value
        assert azure_client.call_args.kwargs["model_deployment_name"] == "test-model"


class TestPrompt:
    """Translator system prompt file."""

    def test_prompt_ships_with_package(self) -> None:
        assert load_prompt().startswith("# News Query Translator")

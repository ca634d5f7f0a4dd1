"""
Tests unitaires — Sélection du provider LLM (clients SDK / LangChain mockés).
"""

import pytest
from unittest.mock import patch

from agrismart.core.settings import Settings
from agrismart.services import llm_clients


def _settings(**overrides):
    values = {
        "AGRISMART_APIKEY": "",
        "GROQ_API_KEY": "",
        "GEMINI_API_KEY": "",
        "AZURE_OPENAI_API_KEY": "",
        "_env_file": None,
    }
    values.update(overrides)
    return Settings(**values)


class TestProviderSelection:

    def test_missing_key_raises(self):
        with patch.object(llm_clients, "settings", _settings(LLM_PROVIDER="groq")):
            with pytest.raises(llm_clients.LLMNotConfiguredError):
                llm_clients.get_chat_client()
            with pytest.raises(llm_clients.LLMNotConfiguredError):
                llm_clients.get_sdk_client()

    def test_unknown_provider_raises(self):
        with patch.object(llm_clients, "settings", _settings(LLM_PROVIDER="bedrock", GROQ_API_KEY="gsk_x")):
            with pytest.raises(llm_clients.LLMNotConfiguredError, match="bedrock"):
                llm_clients.get_sdk_client()

    def test_groq_clients(self):
        cfg = _settings(LLM_PROVIDER="groq", GROQ_API_KEY="gsk_test", LLM_MODEL="llama-3.3-70b-versatile")
        with patch.object(llm_clients, "settings", cfg), \
                patch("groq.Groq") as mock_groq, \
                patch("langchain_groq.ChatGroq") as mock_chat:
            llm_clients.get_sdk_client()
            llm_clients.get_chat_client()
        assert mock_groq.call_args.kwargs["api_key"] == "gsk_test"
        assert mock_chat.call_args.kwargs["model_name"] == "llama-3.3-70b-versatile"

    def test_gemini_uses_openai_compatible_endpoint(self):
        cfg = _settings(LLM_PROVIDER="gemini", GEMINI_API_KEY="g-key", LLM_MODEL="gemini-2.5-flash")
        with patch.object(llm_clients, "settings", cfg), patch("openai.OpenAI") as mock_openai:
            llm_clients.get_sdk_client()
            assert llm_clients.resolve_model() == "gemini-2.5-flash"
        kwargs = mock_openai.call_args.kwargs
        assert kwargs["api_key"] == "g-key"
        assert kwargs["base_url"] == cfg.GEMINI_BASE_URL

    def test_azure_uses_deployment_as_model(self):
        cfg = _settings(
            LLM_PROVIDER="azure",
            AZURE_OPENAI_API_KEY="az-key",
            AZURE_OPENAI_ENDPOINT="https://farm.openai.azure.com/",
            AZURE_OPENAI_DEPLOYMENT_NAME="gpt-4o-farm",
        )
        with patch.object(llm_clients, "settings", cfg), patch("openai.AzureOpenAI") as mock_azure:
            llm_clients.get_sdk_client()
            assert llm_clients.resolve_model(vision=True) == "gpt-4o-farm"
        assert mock_azure.call_args.kwargs["azure_endpoint"] == "https://farm.openai.azure.com/"

    def test_vision_model(self):
        cfg = _settings(LLM_PROVIDER="groq", LLM_VISION_MODEL="vision-x")
        with patch.object(llm_clients, "settings", cfg):
            assert llm_clients.resolve_model(vision=True) == "vision-x"

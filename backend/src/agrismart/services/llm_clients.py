"""
LLM Clients — Couche d'abstraction LLM multi-provider.

Pivoter de fournisseur (Groq → Azure OpenAI → Gemini) se fait
UNIQUEMENT ici + dans settings.py / .env. Le service de conseil ne connaît pas le provider.

Usage:
    from agrismart.services.llm_clients import get_chat_client, get_sdk_client

Providers supportés:
    - "groq"   : Groq Cloud (Llama 3.3, Llama 4 Scout pour la vision)
    - "azure"  : Azure OpenAI (GPT-4o)
    - "gemini" : Google Gemini via son endpoint compatible OpenAI
"""

import logging
from typing import Optional

from agrismart.core.settings import settings

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("groq", "azure", "gemini")


class LLMNotConfiguredError(RuntimeError):
    """Aucune clé API ou provider inconnu."""


def _provider() -> str:
    provider = (settings.LLM_PROVIDER or "groq").strip().lower()
    if provider not in SUPPORTED_PROVIDERS:
        raise LLMNotConfiguredError(
            f"Provider LLM inconnu: {provider!r} (attendu: {', '.join(SUPPORTED_PROVIDERS)})"
        )
    return provider


def _require_api_key() -> str:
    key = settings.llm_api_key
    if not key:
        raise LLMNotConfiguredError(
            "LLM API key is not set. Set GROQ_API_KEY (or AGRISMART_APIKEY) in your .env."
        )
    return key


def resolve_model(vision: bool = False) -> str:
    """Nom du modèle (ou du déploiement Azure) à utiliser."""
    if _provider() == "azure":
        return settings.AZURE_OPENAI_DEPLOYMENT_NAME
    return settings.LLM_VISION_MODEL if vision else settings.LLM_MODEL


def get_chat_client(
    model_name: Optional[str] = None,
    temperature: Optional[float] = None,
):
    """
    Retourne un client LangChain Chat (Runnable).

    Point d'entrée pour les réponses en texte libre.
    Le provider est déterminé par settings.LLM_PROVIDER.
    """
    provider = _provider()
    api_key = _require_api_key()
    _temp = temperature if temperature is not None else settings.LLM_TEMPERATURE
    _timeout = settings.LLM_TIMEOUT_SECONDS

    if provider == "azure":
        from langchain_openai import AzureChatOpenAI
        return AzureChatOpenAI(
            azure_deployment=settings.AZURE_OPENAI_DEPLOYMENT_NAME,
            openai_api_version=settings.AZURE_OPENAI_API_VERSION,
            azure_endpoint=settings.AZURE_OPENAI_ENDPOINT,
            api_key=api_key,
            temperature=_temp,
            timeout=_timeout,
        )

    if provider == "gemini":
        from langchain_openai import ChatOpenAI
        return ChatOpenAI(
            base_url=settings.GEMINI_BASE_URL,
            api_key=api_key,
            model=model_name or settings.LLM_MODEL,
            temperature=_temp,
            timeout=_timeout,
        )

    # Default: Groq
    from langchain_groq import ChatGroq
    return ChatGroq(
        api_key=api_key,
        model_name=model_name or settings.LLM_MODEL,
        temperature=_temp,
        timeout=_timeout,
    )


def get_sdk_client():
    """
    Retourne un SDK client brut (non-LangChain), interface chat.completions.

    Utilisé pour les appels directs en mode JSON et pour la vision
    (diagnostic photo, tendances du marché).
    """
    provider = _provider()
    api_key = _require_api_key()
    _timeout = settings.LLM_TIMEOUT_SECONDS

    if provider == "azure":
        from openai import AzureOpenAI
        return AzureOpenAI(
            api_key=api_key,
            api_version=settings.AZURE_OPENAI_API_VERSION,
            azure_endpoint=settings.AZURE_OPENAI_ENDPOINT,
            timeout=_timeout,
        )

    if provider == "gemini":
        from openai import OpenAI
        return OpenAI(base_url=settings.GEMINI_BASE_URL, api_key=api_key, timeout=_timeout)

    # Default: Groq
    from groq import Groq
    return Groq(api_key=api_key, timeout=_timeout)


__all__ = [
    "get_chat_client",
    "get_sdk_client",
    "resolve_model",
    "LLMNotConfiguredError",
    "SUPPORTED_PROVIDERS",
]

"""
Construction of language model clients from :class:`Settings`.
"""

from __future__ import annotations

from typing import Callable, Optional, Union

from gitscribe.config.settings import DEFAULT_MODELS, Provider, Settings
from gitscribe.credentials import SecretStore
from gitscribe.llm.base import LLMClient, UnsupportedProviderError
from gitscribe.llm.gemini_client import GeminiClient
from gitscribe.llm.ollama_client import OllamaClient


def resolve_provider(
    provider: Optional[Union[str, Provider]], settings: Settings
) -> Provider:
    """Pick the provider: explicit choice, then configuration, then Ollama.

    Raises:
        UnsupportedProviderError: If ``provider`` names no known backend.
    """
    if provider is None or provider == "":
        return settings.provider or Provider.OLLAMA
    try:
        return Provider.parse(provider)
    except ValueError as exc:
        raise UnsupportedProviderError(str(exc)) from exc


def resolve_model(provider: Provider, model: Optional[str], settings: Settings) -> str:
    """Pick the model: explicit choice, then configuration, then the built-in default."""
    return model or settings.configured_model(provider) or DEFAULT_MODELS[provider]


def create_client(
    provider: Union[str, Provider],
    settings: Settings,
    model: Optional[str] = None,
    secret_store: Optional[SecretStore] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> LLMClient:
    """Return the client for ``provider`` configured from ``settings``.

    Raises:
        UnsupportedProviderError: If ``provider`` names no known backend.
    """
    try:
        provider = Provider.parse(provider)
    except ValueError as exc:
        raise UnsupportedProviderError(str(exc)) from exc
    model = resolve_model(provider, model, settings)

    if provider is Provider.OLLAMA:
        ollama = settings.ollama
        return OllamaClient(
            model=model,
            max_retries=ollama.max_retries,
            initial_backoff=ollama.initial_backoff,
            request_timeout=settings.request_timeout,
            sleep=sleep,
            url=ollama.url,
            temperature=ollama.temperature,
            context_window_min=ollama.context_window_min,
            context_window_max=ollama.context_window_max,
            chars_per_token=ollama.chars_per_token,
        )
    if provider is Provider.GEMINI:
        gemini = settings.gemini
        return GeminiClient(
            model=model,
            max_retries=gemini.max_retries,
            initial_backoff=gemini.initial_backoff,
            request_timeout=settings.request_timeout,
            sleep=sleep,
            url=gemini.url,
            api_key_name=gemini.api_key_name,
            secret_store=secret_store or SecretStore(),
        )
    raise UnsupportedProviderError(f"Unsupported provider: {provider!r}")

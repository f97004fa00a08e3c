"""
Configuration value objects for gitscribe.

:class:`Settings` is loaded once by the CLI (see
:mod:`gitscribe.config.loader`) and handed to every component that
needs it. It is frozen; nothing in the generation pipeline mutates it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Union


class Provider(str, Enum):
    """Supported language model backends."""

    OLLAMA = "ollama"
    GEMINI = "gemini"

    @classmethod
    def parse(cls, value: Union[str, "Provider"]) -> "Provider":
        """Return the provider named by ``value``.

        ``local`` and ``cloud`` are accepted as aliases for Ollama and
        Gemini. Raises :class:`ValueError` for anything else.
        """
        if isinstance(value, Provider):
            return value
        name = str(value).strip().lower()
        name = _ALIASES.get(name, name)
        for provider in cls:
            if provider.value == name:
                return provider
        raise ValueError(f"Unsupported provider: {value!r}")


_ALIASES = {"local": "ollama", "cloud": "gemini", "google": "gemini"}

DEFAULT_PROVIDER = Provider.OLLAMA

DEFAULT_MODELS: Dict[Provider, str] = {
    Provider.OLLAMA: "llama3",
    Provider.GEMINI: "gemini-1.5-flash",
}


@dataclass(frozen=True)
class OllamaSettings:
    """Connection and sizing parameters for a local Ollama server."""

    url: str = "http://localhost:11434/api/chat"
    model: Optional[str] = None
    max_retries: int = 3
    initial_backoff: float = 1.0
    temperature: float = 0.2
    context_window_min: int = 2048
    context_window_max: int = 32768
    chars_per_token: int = 4


@dataclass(frozen=True)
class GeminiSettings:
    """Connection parameters for the Google Gemini REST API."""

    url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    model: Optional[str] = None
    max_retries: int = 5
    initial_backoff: float = 1.0
    api_key_name: str = "GEMINI_API_KEY"


@dataclass(frozen=True)
class Settings:
    """Complete gitscribe configuration.

    Attributes
    ----------
    provider : Provider, optional
        Provider used when the caller does not choose one. ``None`` means
        no preference was configured.
    request_timeout : float
        Timeout in seconds for every HTTP request.
    ollama : OllamaSettings
        Settings for the local backend.
    gemini : GeminiSettings
        Settings for the cloud backend.
    """

    provider: Optional[Provider] = None
    request_timeout: float = 120.0
    ollama: OllamaSettings = field(default_factory=OllamaSettings)
    gemini: GeminiSettings = field(default_factory=GeminiSettings)

    def configured_model(self, provider: Provider) -> Optional[str]:
        """Return the model configured for ``provider``, if any."""
        if provider is Provider.OLLAMA:
            return self.ollama.model
        return self.gemini.model

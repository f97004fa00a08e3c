"""
Language model integration for gitscribe.

This package contains the two interchangeable clients,
:class:`OllamaClient` for a local Ollama server and
:class:`GeminiClient` for Google Gemini, their shared retry protocol in
:class:`LLMClient`, and :func:`create_client` to build one from the
configuration. The commit message pipeline itself lives in
:mod:`gitscribe.llm.commit_message_generator`.
"""

from .base import (  # noqa: F401
    LLMClient,
    LLMError,
    RetryExhaustedError,
    UnsupportedProviderError,
)
from .factory import create_client  # noqa: F401
from .gemini_client import GeminiClient  # noqa: F401
from .ollama_client import OllamaClient  # noqa: F401

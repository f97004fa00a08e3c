"""
Client for the Google Gemini ``generateContent`` REST endpoint.

The API key is read from the secret store for every request, passed as
the ``key`` query parameter and released right after the request. Only
HTTP 429 (rate limiting) is retried; any other error status, or a
failure to reach the server, is raised immediately.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict

import requests

from gitscribe.config.settings import Provider
from gitscribe.credentials import ScopedSecret, SecretStore
from gitscribe.llm.base import LLMClient, LLMError, TransientLLMError
from gitscribe.summary.models import PromptPair


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


RATE_LIMITED = 429


def _redact(text: str, secret: str) -> str:
    return text.replace(secret, "***") if secret else text


def extract_candidate_text(data: Any) -> str:
    """Return the first text part of the first candidate.

    Falls back to a diagnostic string embedding the raw reply when the
    reply does not have the expected shape.
    """
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        logger.debug("Gemini reply without candidate text: %s", exc)
        text = None
    if isinstance(text, str) and text.strip():
        return text.strip()
    raw = json.dumps(data, ensure_ascii=False)
    logger.warning("Unexpected response structure from Gemini: %s", raw)
    return f"[unparsed LLM response] {raw}"


@dataclass
class GeminiClient(LLMClient):
    """Client for Google Gemini.

    Parameters
    ----------
    url : str, optional
        Base URL of the models collection; ``/<model>:generateContent``
        is appended.
    api_key_name : str, optional
        Name of the secret holding the API key.
    secret_store : SecretStore, optional
        Where API keys are looked up.
    """

    provider = Provider.GEMINI

    max_retries: int = 5
    url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    api_key_name: str = "GEMINI_API_KEY"
    secret_store: SecretStore = field(default_factory=SecretStore, repr=False)

    def _endpoint(self) -> str:
        return f"{self.url.rstrip('/')}/{self.model}:generateContent"

    @staticmethod
    def build_payload(prompt: PromptPair) -> Dict[str, Any]:
        combined = f"{prompt.system_prompt}\n\n{prompt.user_prompt}"
        return {"contents": [{"role": "user", "parts": [{"text": combined}]}]}

    def _attempt(self, prompt: PromptPair) -> str:
        payload = self.build_payload(prompt)
        endpoint = self._endpoint()
        with ScopedSecret(self.secret_store.get_secret(self.api_key_name)) as secret:
            key = secret.reveal()
            logger.debug("Sending request to Gemini at %s?key=***", endpoint)
            try:
                response = requests.post(
                    endpoint,
                    params={"key": key},
                    json=payload,
                    timeout=self.request_timeout,
                )
            except requests.RequestException as exc:
                message = _redact(str(exc), key)
                logger.error("Failed to connect to Gemini: %s", message)
                # from None: the original exception text contains the key
                raise LLMError(f"Failed to connect to Gemini: {message}") from None

        if response.status_code == RATE_LIMITED:
            raise TransientLLMError("Gemini rate limit exceeded (HTTP 429)")
        if response.status_code != 200:
            logger.error(
                "Gemini returned non-200 status %s: %s", response.status_code, response.text
            )
            raise LLMError(f"Gemini returned status {response.status_code}: {response.text}")
        try:
            data = response.json()
        except ValueError as exc:
            logger.warning("Failed to parse Gemini response: %s", exc)
            return f"[unparsed LLM response] {response.text}"
        return extract_candidate_text(data)

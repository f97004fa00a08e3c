"""
Client for interacting with an Ollama LLM server.

Requests go to the ``/api/chat`` endpoint with a system and a user
message and a JSON schema asking the model to answer with a single
``message`` string. Connection failures, timeouts and non-200 replies
are retried by :class:`~gitscribe.llm.base.LLMClient`.

Replies are read through a chain of extraction strategies. When none of
them finds text, a diagnostic string embedding the raw reply is
returned instead of raising, so that one odd reply does not abort the
whole run.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import requests

from gitscribe.config.settings import Provider
from gitscribe.llm.base import LLMClient, TransientLLMError
from gitscribe.summary.models import PromptPair


logger = logging.getLogger(__name__)
# Attach a null handler to avoid errors when the root logger is missing a
# stream. Messages will still propagate to the root logger if configured.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {"message": {"type": "string"}},
    "required": ["message"],
}

_THINKING_PATTERNS = [
    r"<think>.*?</think>",
    r"<thinking>.*?</thinking>",
    r"<thought>.*?</thought>",
    r"<reasoning>.*?</reasoning>",
]


def strip_thinking_tags(text: str) -> str:
    """Remove reasoning blocks from an LLM reply.

    Models with reasoning capabilities often wrap their thinking process
    in tags such as ``<think>`` or ``<reasoning>``. The tags and their
    contents are removed and the remaining text is stripped.

    Examples
    --------
    >>> strip_thinking_tags("<think>reasoning...</think>Answer")
    'Answer'
    """
    result = text
    for pattern in _THINKING_PATTERNS:
        result = re.sub(pattern, "", result, flags=re.DOTALL | re.IGNORECASE)
    return result.strip()


def _message_content(data: Dict[str, Any]) -> Optional[str]:
    message = data.get("message")
    if isinstance(message, dict) and isinstance(message.get("content"), str):
        return strip_thinking_tags(message["content"])
    return None


def _schema_reply(content: Optional[str]) -> Optional[Dict[str, Any]]:
    """Return ``content`` decoded if it is a JSON object with a ``message`` key."""
    if content is None or not content.startswith("{"):
        return None
    try:
        inner = json.loads(content)
    except json.JSONDecodeError:
        return None
    if isinstance(inner, dict) and "message" in inner:
        return inner
    return None


def _from_json_content(data: Dict[str, Any]) -> Optional[str]:
    """The schema-constrained shape: ``message.content`` is ``{"message": ...}``."""
    inner = _schema_reply(_message_content(data))
    if inner is not None and isinstance(inner["message"], str):
        return inner["message"].strip()
    return None


def _from_plain_content(data: Dict[str, Any]) -> Optional[str]:
    """A chat reply whose content is plain text."""
    content = _message_content(data)
    # an empty schema reply is not prose
    if _schema_reply(content) is not None:
        return None
    return content or None


def _from_generate_response(data: Dict[str, Any]) -> Optional[str]:
    """The ``/api/generate`` shape with a top-level ``response`` field."""
    response = data.get("response")
    if isinstance(response, str) and response.strip():
        return strip_thinking_tags(response)
    return None


EXTRACTORS: List[Callable[[Dict[str, Any]], Optional[str]]] = [
    _from_json_content,
    _from_plain_content,
    _from_generate_response,
]


def extract_reply(data: Any) -> str:
    """Return the reply text from a decoded Ollama response.

    The first extractor that yields text wins. If all of them fail, a
    diagnostic string containing the serialized reply is returned.
    """
    if isinstance(data, dict):
        for extractor in EXTRACTORS:
            try:
                text = extractor(data)
            except (TypeError, AttributeError, ValueError) as exc:
                logger.debug("Extractor %s failed: %s", extractor.__name__, exc)
                continue
            if text:
                return text
    raw = json.dumps(data, ensure_ascii=False)
    logger.warning("Unexpected response structure from LLM: %s", raw)
    return f"[unparsed LLM response] {raw}"


@dataclass
class OllamaClient(LLMClient):
    """Client for a local Ollama server.

    Parameters
    ----------
    url : str, optional
        Full URL of the chat endpoint.
    temperature : float, optional
        Sampling temperature; kept low for factual summaries.
    context_window_min, context_window_max : int, optional
        Bounds for the ``num_ctx`` option sized from the prompt.
    chars_per_token : int, optional
        Rough number of characters per token used for that sizing.
    """

    provider = Provider.OLLAMA

    url: str = "http://localhost:11434/api/chat"
    temperature: float = 0.2
    context_window_min: int = 2048
    context_window_max: int = 32768
    chars_per_token: int = 4

    def context_window(self, prompt: PromptPair) -> int:
        """Estimate a ``num_ctx`` large enough for ``prompt`` and the reply."""
        characters = len(prompt.system_prompt) + len(prompt.user_prompt)
        tokens = characters // max(1, self.chars_per_token)
        # Room for the reply, rounded up to a multiple of 1024
        wanted = -(-(tokens * 2) // 1024) * 1024
        return max(self.context_window_min, min(self.context_window_max, wanted))

    def build_payload(self, prompt: PromptPair) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": prompt.system_prompt},
                {"role": "user", "content": prompt.user_prompt},
            ],
            "stream": False,
            "format": RESPONSE_SCHEMA,
            "options": {
                "temperature": self.temperature,
                "num_ctx": self.context_window(prompt),
            },
        }

    def _attempt(self, prompt: PromptPair) -> str:
        payload = self.build_payload(prompt)
        logger.debug(
            "Sending request to Ollama at %s (model=%s, num_ctx=%s)",
            self.url,
            self.model,
            payload["options"]["num_ctx"],
        )
        try:
            response = requests.post(self.url, json=payload, timeout=self.request_timeout)
        except requests.RequestException as exc:
            raise TransientLLMError(f"Failed to connect to LLM: {exc}") from exc
        if response.status_code != 200:
            raise TransientLLMError(
                f"LLM returned status {response.status_code}: {response.text}"
            )
        try:
            data = response.json()
        except ValueError as exc:
            logger.warning("Failed to parse LLM response: %s", exc)
            return f"[unparsed LLM response] {response.text}"
        return extract_reply(data)

"""
Common interface and retry protocol for language model clients.

Every backend subclasses :class:`LLMClient` and implements a single
request attempt in :meth:`LLMClient._attempt`. Attempts that fail in a
way worth retrying raise :class:`TransientLLMError`; the base class
then sleeps with exponential backoff and tries again until the attempt
budget is spent, at which point :class:`RetryExhaustedError` is raised.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, ClassVar, Optional

from gitscribe.config.settings import Provider
from gitscribe.summary.models import PromptPair


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class LLMError(Exception):
    """Raised when communication with the language model fails."""

    pass


class TransientLLMError(LLMError):
    """A failed attempt that may succeed when repeated."""

    pass


class RetryExhaustedError(LLMError):
    """Raised when every allowed attempt failed."""

    def __init__(self, message: str, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


class UnsupportedProviderError(LLMError):
    """Raised when no client exists for the requested provider."""

    pass


@dataclass
class LLMClient(ABC):
    """Base class for language model clients.

    Parameters
    ----------
    model : str
        Name of the model to use.
    max_retries : int, optional
        Total number of attempts per :meth:`generate` call.
    initial_backoff : float, optional
        Seconds to wait after the first failed attempt. The wait doubles
        after every further failure.
    request_timeout : float, optional
        Timeout in seconds for each HTTP request.
    sleep : Callable[[float], None], optional
        Function used to wait between attempts. Defaults to
        :func:`time.sleep`.
    """

    provider: ClassVar[Provider]

    model: str
    max_retries: int = 3
    initial_backoff: float = 1.0
    request_timeout: float = 120.0
    sleep: Optional[Callable[[float], None]] = None

    def generate(self, prompt: PromptPair) -> str:
        """Send ``prompt`` to the model and return the reply text.

        Raises
        ------
        RetryExhaustedError
            If every attempt failed with a retryable error.
        LLMError
            If an attempt failed with a non-retryable error.
        """
        return self._with_retry(lambda: self._attempt(prompt))

    @abstractmethod
    def _attempt(self, prompt: PromptPair) -> str:
        """Perform one request. Raise :class:`TransientLLMError` to retry."""

    def _with_retry(self, call: Callable[[], str]) -> str:
        sleep = self.sleep or time.sleep
        attempts = max(1, self.max_retries)
        backoff = self.initial_backoff
        for attempt in range(1, attempts + 1):
            try:
                return call()
            except TransientLLMError as exc:
                if attempt >= attempts:
                    logger.error(
                        "%s request failed after %d attempt(s): %s",
                        self.provider.value,
                        attempt,
                        exc,
                    )
                    raise RetryExhaustedError(
                        f"{self.provider.value} request failed after {attempt} "
                        f"attempt(s): {exc}",
                        attempts=attempt,
                    ) from exc
                logger.warning(
                    "%s request failed (attempt %d/%d): %s; retrying in %.1fs",
                    self.provider.value,
                    attempt,
                    attempts,
                    exc,
                    backoff,
                )
                sleep(backoff)
                backoff *= 2
        # attempts is always >= 1, so the loop returns or raises
        raise AssertionError("unreachable")

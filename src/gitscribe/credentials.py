"""
API key storage for the cloud provider.

Secrets are looked up by name, first in the process environment and
then in ``~/.gitscribe/credentials``, a file of ``NAME=value`` lines
(blank lines and ``#`` comments are ignored).

Callers hold a secret in a :class:`ScopedSecret` for as short a time as
possible. Leaving the ``with`` block overwrites the buffer with zeros,
whether the block completed or raised. Immutable copies of the secret
(the revealed ``str``, the environment value) are not covered.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from gitscribe.config.loader import get_config_directory


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


CREDENTIALS_FILE_NAME = "credentials"


class SecretError(Exception):
    """Raised when a secret cannot be found or read."""

    pass


class ScopedSecret:
    """A secret held in a mutable buffer that is zeroed on scope exit.

    A ``bytearray`` is adopted as the buffer without copying; other values
    are copied into a new one. Only this buffer is zeroed. Immutable copies,
    such as the text returned by :meth:`reveal` or a request URL kept by
    ``requests``, stay in memory until garbage collected.

    Example
    -------
    >>> with ScopedSecret(b"token") as secret:
    ...     secret.reveal()
    'token'
    """

    def __init__(self, value: Union[bytes, bytearray, str]) -> None:
        if isinstance(value, str):
            value = value.encode("utf-8")
        self._buffer = value if isinstance(value, bytearray) else bytearray(value)
        self._released = False

    def __enter__(self) -> "ScopedSecret":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.release()
        return False

    def __repr__(self) -> str:
        return "ScopedSecret(<redacted>)"

    @property
    def released(self) -> bool:
        return self._released

    def reveal(self) -> str:
        """Return the secret as text.

        Raises:
            SecretError: If the secret has already been released.
        """
        if self._released:
            raise SecretError("Secret has already been released")
        return self._buffer.decode("utf-8")

    def release(self) -> None:
        """Overwrite the buffer with zeros. Safe to call more than once."""
        for index in range(len(self._buffer)):
            self._buffer[index] = 0
        self._released = True


class SecretStore:
    """Look up secrets by name in the environment and a credentials file.

    Parameters
    ----------
    credentials_path : Path, optional
        Location of the credentials file. Defaults to
        ``~/.gitscribe/credentials``.
    environ : Mapping[str, str], optional
        Environment to consult first. Defaults to ``os.environ``.
    """

    def __init__(
        self,
        credentials_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.credentials_path = credentials_path or (
            get_config_directory() / CREDENTIALS_FILE_NAME
        )
        self.environ = os.environ if environ is None else environ

    def _load_file(self) -> Dict[str, str]:
        if not self.credentials_path.exists():
            return {}
        credentials: Dict[str, str] = {}
        try:
            content = self.credentials_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SecretError(
                f"Failed to read credentials from {self.credentials_path}: {exc}"
            ) from exc
        for line in content.splitlines():
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            credentials[key.strip()] = value.strip()
        return credentials

    def get_secret(self, name: str) -> bytearray:
        """Return the secret called ``name`` in a fresh mutable buffer.

        Handing the buffer to :class:`ScopedSecret` lets it be zeroed in
        place.

        Raises:
            SecretError: If the secret is not set anywhere.
        """
        value = self.environ.get(name)
        if value:
            logger.debug("Using secret '%s' from the environment", name)
            return bytearray(value, "utf-8")
        value = self._load_file().get(name)
        if value:
            logger.debug("Using secret '%s' from %s", name, self.credentials_path)
            return bytearray(value, "utf-8")
        raise SecretError(
            f"Secret '{name}' not found. Set it using:\n"
            f"  1. Environment variable: export {name}=your_key_here\n"
            f"  2. A '{name}=your_key_here' line in {self.credentials_path}"
        )

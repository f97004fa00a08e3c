"""
Configuration loader for gitscribe.

The tool reads an optional JSON configuration file named
``config.json`` from the ``~/.gitscribe/`` directory in the user's home
directory. When the file is absent the built-in defaults are used. A
file that exists but cannot be read, is not valid JSON, or contains
values of the wrong type raises :class:`ConfigError`.

The loaded configuration is returned as an immutable
:class:`~gitscribe.config.settings.Settings` instance.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type

from gitscribe.config.settings import (
    GeminiSettings,
    OllamaSettings,
    Provider,
    Settings,
)


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings in environments
# where logging has not been configured. The CLI configures the root
# logger explicitly.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


CONFIG_FILE_NAME = "config.json"

_NUMBER = (int, float)

# Expected types for the keys of each provider section
_OLLAMA_KEYS: Dict[str, Tuple[Type, ...]] = {
    "url": (str,),
    "model": (str,),
    "max_retries": (int,),
    "initial_backoff": _NUMBER,
    "temperature": _NUMBER,
    "context_window_min": (int,),
    "context_window_max": (int,),
    "chars_per_token": (int,),
}
_GEMINI_KEYS: Dict[str, Tuple[Type, ...]] = {
    "url": (str,),
    "model": (str,),
    "max_retries": (int,),
    "initial_backoff": _NUMBER,
    "api_key_name": (str,),
}


class ConfigError(Exception):
    """Raised when the gitscribe configuration file is invalid."""

    pass


def get_config_directory() -> Path:
    """Return the directory holding the user-level configuration.

    Returns:
        Path to the ``~/.gitscribe/`` directory.
    """
    return Path.home() / ".gitscribe"


def _validate_section(
    name: str, data: Any, expected: Dict[str, Tuple[Type, ...]]
) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ConfigError(f"'{name}' must be an object")
    values: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in expected:
            logger.warning("Ignoring unknown configuration key '%s.%s'", name, key)
            continue
        types = expected[key]
        # bool is an int subclass, but never a meaningful count or duration
        if isinstance(value, bool) or not isinstance(value, types):
            type_name = "a number" if types == _NUMBER else f"a {types[0].__name__}"
            raise ConfigError(f"'{name}.{key}' must be {type_name}")
        if key == "max_retries" and value < 1:
            raise ConfigError(f"'{name}.max_retries' must be at least 1")
        if key == "initial_backoff" and value < 0:
            raise ConfigError(f"'{name}.initial_backoff' must not be negative")
        values[key] = value
    return values


def parse_config(data: Dict[str, Any]) -> Settings:
    """Build :class:`Settings` from an already decoded configuration mapping.

    Raises:
        ConfigError: If a value has the wrong type or names an unknown
            provider.
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")

    provider: Optional[Provider] = None
    if "provider" in data:
        try:
            provider = Provider.parse(data["provider"])
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

    request_timeout = data.get("request_timeout", Settings.request_timeout)
    if isinstance(request_timeout, bool) or not isinstance(request_timeout, _NUMBER):
        raise ConfigError("'request_timeout' must be a number")

    ollama = OllamaSettings(**_validate_section("ollama", data.get("ollama", {}), _OLLAMA_KEYS))
    gemini = GeminiSettings(**_validate_section("gemini", data.get("gemini", {}), _GEMINI_KEYS))
    if ollama.context_window_min > ollama.context_window_max:
        raise ConfigError(
            "'ollama.context_window_min' must not exceed 'ollama.context_window_max'"
        )

    return Settings(
        provider=provider,
        request_timeout=float(request_timeout),
        ollama=ollama,
        gemini=gemini,
    )


def load_config(config_path: Optional[Path] = None) -> Settings:
    """Load the gitscribe configuration and return it.

    Args:
        config_path: Explicit path of the configuration file. Defaults to
            ``~/.gitscribe/config.json``.

    Returns:
        The validated :class:`Settings`. Defaults are returned when the
        file does not exist.

    Raises:
        ConfigError: If the file is unreadable, malformed or invalid.
    """
    if config_path is None:
        config_path = get_config_directory() / CONFIG_FILE_NAME

    if not config_path.exists():
        logger.debug("No configuration file at %s; using defaults", config_path)
        return Settings()

    try:
        content = config_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    settings = parse_config(data)
    logger.debug("Loaded configuration from: %s", config_path)
    return settings

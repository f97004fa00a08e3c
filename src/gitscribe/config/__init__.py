"""
Configuration for gitscribe.

Provides the immutable :class:`Settings` value object and a loader for
the user-level ``~/.gitscribe/config.json`` file. See
:mod:`gitscribe.config.loader` for details.
"""

from .loader import ConfigError, load_config  # noqa: F401
from .settings import Provider, Settings  # noqa: F401

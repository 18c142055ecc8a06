"""
Environment configuration for XHR Client.

Load ClientConfig defaults from .env files and environment variables.

Example:
    >>> from xhr_client.core.env_config import load_from_env
    >>>
    >>> # Load from .env
    >>> config = load_from_env()
    >>>
    >>> # Load with overrides
    >>> config = load_from_env(timeout_ms=2500, response_kind="json")
"""

from .loader import load_from_env, print_config_summary
from .validator import XHRClientSettings, LoggingSettings

__all__ = [
    # Main loader
    "load_from_env",
    "print_config_summary",
    # Validators
    "XHRClientSettings",
    "LoggingSettings",
]

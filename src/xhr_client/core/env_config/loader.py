"""
Configuration loader from environment variables and .env files.
"""

import logging
from typing import Optional

from ..config import ClientConfig, TransportConfig
from ..logging.config import LoggingConfig
from .validator import XHRClientSettings


def load_from_env(env_file: Optional[str] = None, **overrides) -> ClientConfig:
    """
    Load ClientConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters
    2. Environment variables (XHR_CLIENT_*)
    3. .env file
    4. Defaults

    Args:
        env_file: Custom .env file path
        **overrides: Explicit config overrides (field names of XHRClientSettings,
            plus ``headers``)

    Returns:
        ClientConfig instance

    Raises:
        pydantic.ValidationError: Invalid environment value
        ConfigurationError: Invalid override

    Example:
        >>> config = load_from_env(env_file=".env.test", timeout_ms=1000)
    """
    settings = XHRClientSettings(_env_file=env_file) if env_file else XHRClientSettings()

    transport = TransportConfig(
        verify_ssl=overrides.get('verify_ssl', settings.verify_ssl),
        allow_redirects=overrides.get('allow_redirects', settings.allow_redirects),
        max_redirects=overrides.get('max_redirects', settings.max_redirects),
        proxies=overrides.get('proxies') or {},
    )

    logging_config = None
    logging_settings = settings.to_logging_settings()
    if overrides.get('log_enabled', logging_settings is not None):
        logging_config = LoggingConfig.create(
            level=overrides.get('log_level', settings.log_level),
            format=overrides.get('log_format', settings.log_format),
            enable_console=overrides.get('log_enable_console', settings.log_enable_console),
            enable_file=overrides.get('log_enable_file', settings.log_enable_file),
            file_path=overrides.get('log_file_path', settings.log_file_path),
            max_bytes=overrides.get('log_max_bytes', settings.log_max_bytes),
            backup_count=overrides.get('log_backup_count', settings.log_backup_count),
            outcome_levels=overrides.get('log_outcome_levels'),
        )

    return ClientConfig(
        headers=overrides.get('headers') or {},
        timeout_ms=overrides.get('timeout_ms', settings.timeout_ms),
        response_kind=overrides.get('response_kind', settings.response_kind),
        transport=transport,
        logging=logging_config,
    )


def print_config_summary(config: ClientConfig):
    """
    Print configuration summary.

    Example:
        >>> print_config_summary(load_from_env())
        ClientConfig:
          timeout_ms: 0
          response_kind: text
          ...
    """
    print("ClientConfig:")
    print(f"  timeout_ms: {config.timeout_ms}")
    print(f"  response_kind: {config.response_kind.value}")
    print(f"  headers: {', '.join(config.headers) or '-'}")
    print(f"  transport: verify_ssl={config.transport.verify_ssl}, "
          f"allow_redirects={config.transport.allow_redirects}, "
          f"max_redirects={config.transport.max_redirects}")

    if config.logging:
        print(f"  logging: level={logging.getLevelName(config.logging.level)}, format={config.logging.format.value}")
        if config.logging.enable_file:
            print(f"    file: {config.logging.file_path}")
    else:
        print("  logging: disabled")

"""
Pydantic validators for environment configuration.
"""

from typing import Optional, Literal
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseModel):
    """Logging configuration from environment."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    format: Literal["json", "text"] = Field(default="text")
    enable_console: bool = Field(default=True)
    enable_file: bool = Field(default=False)
    file_path: Optional[str] = None
    max_bytes: int = Field(default=10 * 1024 * 1024, gt=0, description="10MB")
    backup_count: int = Field(default=5, ge=0)

    @field_validator('file_path')
    @classmethod
    def validate_file_path(cls, v: Optional[str], info) -> Optional[str]:
        """Validate file_path is required when enable_file=True."""
        if info.data.get('enable_file') and not v:
            raise ValueError("file_path is required when enable_file=True")
        return v


class XHRClientSettings(BaseSettings):
    """
    XHR Client defaults from environment variables.

    Reads from:
    1. Environment variables (XHR_CLIENT_*)
    2. .env file
    3. Defaults

    Example .env file:
        XHR_CLIENT_TIMEOUT_MS=5000
        XHR_CLIENT_RESPONSE_KIND=json
        XHR_CLIENT_VERIFY_SSL=false
        XHR_CLIENT_LOG_ENABLED=true
        XHR_CLIENT_LOG_LEVEL=DEBUG

    Usage:
        >>> settings = XHRClientSettings()
        >>> settings.timeout_ms
        5000
    """

    model_config = SettingsConfigDict(
        env_prefix='XHR_CLIENT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # Request defaults
    timeout_ms: int = Field(default=0, ge=0, description="Default timeout in milliseconds (0 = none)")
    response_kind: Literal["", "text", "arraybuffer", "blob", "document", "json"] = Field(default="text")

    # Transport
    verify_ssl: bool = Field(default=True)
    allow_redirects: bool = Field(default=True)
    max_redirects: int = Field(default=30, ge=0)

    # Logging (disabled unless log_enabled)
    log_enabled: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(default="text")
    log_enable_console: bool = Field(default=True)
    log_enable_file: bool = Field(default=False)
    log_file_path: Optional[str] = None
    log_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    log_backup_count: int = Field(default=5, ge=0)

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('response_kind', 'log_format', mode='before')
    @classmethod
    def normalize_lower(cls, v):
        return v.lower() if isinstance(v, str) else v

    def to_logging_settings(self) -> Optional[LoggingSettings]:
        """Convert to LoggingSettings if logging enabled."""
        if not self.log_enabled:
            return None
        if not self.log_enable_file and not self.log_enable_console:
            return None

        return LoggingSettings(
            level=self.log_level,
            format=self.log_format,
            enable_console=self.log_enable_console,
            enable_file=self.log_enable_file,
            file_path=self.log_file_path,
            max_bytes=self.log_max_bytes,
            backup_count=self.log_backup_count,
        )

"""
Система конфигурации для XHR Client.

Все конфиги immutable (frozen dataclasses): один ClientConfig можно
разделять между любым количеством FluentRequest.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Mapping, Optional, TYPE_CHECKING, Union

from .exceptions import ConfigurationError
from .states import ResponseKind

if TYPE_CHECKING:
    from .logging import LoggingConfig


def _freeze_dict(d: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    """
    Convert dict to immutable MappingProxyType.

    Example:
        >>> frozen = _freeze_dict({"X-API-Key": "secret"})
        >>> frozen["X-New"] = "value"  # Raises TypeError
    """
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TRANSPORT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TransportConfig:
    """
    Конфигурация сетевого транспорта.

    Args:
        verify_ssl: Проверять SSL сертификаты
        allow_redirects: Следовать редиректам
        max_redirects: Максимум редиректов
        proxies: Прокси {"http": "...", "https": "..."}

    Examples:
        >>> TransportConfig(verify_ssl=False)  # Для тестов
        >>> TransportConfig(max_redirects=5)
    """
    verify_ssl: bool = True
    allow_redirects: bool = True
    max_redirects: int = 30
    proxies: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        """Валидация."""
        if self.max_redirects < 0:
            raise ConfigurationError("max_redirects must be non-negative")
        if not isinstance(self.proxies, MappingProxyType):
            object.__setattr__(self, 'proxies', _freeze_dict(self.proxies))

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ClientConfig:
    """
    Главная конфигурация: значения по умолчанию для новых запросов.

    Args:
        headers: Заголовки, копируемые в каждый новый запрос
        timeout_ms: Таймаут по умолчанию (мс, 0 = без таймаута)
        response_kind: Ожидаемый тип ответа по умолчанию
        transport: Конфигурация транспорта
        logging: Конфигурация логирования (None = без логирования)

    Examples:
        >>> config = ClientConfig(timeout_ms=5000)
        >>> config = ClientConfig.create(headers={"Accept": "application/json"}, response_kind="json")
    """
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    timeout_ms: int = 0
    response_kind: ResponseKind = ResponseKind.TEXT
    transport: TransportConfig = field(default_factory=TransportConfig)
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Валидация и заморозка словарей."""
        if isinstance(self.timeout_ms, bool) or not isinstance(self.timeout_ms, int):
            raise ConfigurationError("timeout_ms must be an integer")
        if self.timeout_ms < 0:
            raise ConfigurationError("timeout_ms must be non-negative")

        kind = ResponseKind.parse(self.response_kind)
        if kind is None:
            raise ConfigurationError(f"Unknown response kind: {self.response_kind!r}")
        object.__setattr__(self, 'response_kind', kind)

        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, 'headers', _freeze_dict(self.headers))

    @classmethod
    def create(
        cls,
        headers: Optional[Dict[str, str]] = None,
        timeout_ms: int = 0,
        response_kind: Union[str, ResponseKind] = ResponseKind.TEXT,
        verify_ssl: bool = True,
        allow_redirects: bool = True,
        max_redirects: Optional[int] = None,
        proxies: Optional[Dict[str, str]] = None,
        logging: Optional['LoggingConfig'] = None,
    ) -> 'ClientConfig':
        """
        Удобный конструктор конфигурации.

        Returns:
            ClientConfig instance

        Examples:
            >>> config = ClientConfig.create(timeout_ms=10_000, verify_ssl=False)
        """
        transport_kwargs = {
            'verify_ssl': verify_ssl,
            'allow_redirects': allow_redirects,
            'proxies': proxies or {},
        }
        if max_redirects is not None:
            transport_kwargs['max_redirects'] = max_redirects

        return cls(
            headers=headers or {},
            timeout_ms=timeout_ms,
            response_kind=response_kind,
            transport=TransportConfig(**transport_kwargs),
            logging=logging,
        )

    def with_timeout(self, timeout_ms: int) -> 'ClientConfig':
        """
        Создать новый конфиг с изменённым таймаутом.

        Example:
            >>> new_config = config.with_timeout(30_000)
        """
        return replace(self, timeout_ms=timeout_ms)

    def with_headers(self, headers: Dict[str, str]) -> 'ClientConfig':
        """
        Создать новый конфиг с дополнительными заголовками.

        Example:
            >>> new_config = config.with_headers({"X-API-Key": "secret"})
        """
        merged = dict(self.headers)
        merged.update(headers)
        return replace(self, headers=merged)

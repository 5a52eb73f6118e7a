"""Таблица схема URI → фабрика зонда.

Таблицу создаёт точка сборки приложения (см. `waitfor.cli.build_registry`)
и передаёт дальше явно, глобального реестра нет.
"""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

from probes.base import Factory, ReadinessProbe
from waitfor.errors import InvalidResourceIdentifier, UnsupportedScheme
from waitfor.models import ResourceConfig

logger = logging.getLogger(__name__)


class Registry:
    """Реестр фабрик зондов по схеме URI.

    Args:
        configs: Привязки, которые отдают плагины (`probes.fs.use()` и т.п.).
    """

    def __init__(self, *configs: ResourceConfig) -> None:
        self._factories: dict[str, Factory] = {}
        for config in configs:
            self.use(config)

    def register(self, scheme: str, factory: Factory) -> None:
        """Зарегистрировать фабрику для схемы. Повторная регистрация заменяет старую."""
        key = scheme.strip().lower()
        if not key:
            raise ValueError("scheme must not be empty")
        if key in self._factories:
            logger.warning("Фабрика для схемы %r заменена", key)
        self._factories[key] = factory

    def use(self, config: ResourceConfig) -> None:
        for scheme in config.schemes:
            self.register(scheme, config.factory)

    def schemes(self) -> list[str]:
        return sorted(self._factories)

    def factory(self, scheme: str) -> Factory:
        try:
            return self._factories[scheme.lower()]
        except KeyError:
            raise UnsupportedScheme(scheme) from None

    def resolve(self, uri: str) -> ReadinessProbe:
        """Создать зонд для URI по его схеме.

        Фабрика получает исходную строку URI без разбора и сборки обратно.

        Raises:
            InvalidResourceIdentifier: В URI нет схемы.
            UnsupportedScheme: Для схемы нет фабрики.
        """
        parsed = urlsplit(uri)
        if not parsed.scheme:
            raise InvalidResourceIdentifier(f"resource identifier {uri!r} has no scheme")

        factory = self.factory(parsed.scheme)
        logger.debug("Зонд для %s: схема %s", uri, parsed.scheme)
        return factory(uri)

    def __contains__(self, scheme: object) -> bool:
        return isinstance(scheme, str) and scheme.lower() in self._factories

    def __repr__(self) -> str:
        return f"<Registry schemes={self.schemes()!r}>"

"""Общий интерфейс зондов готовности waitfor."""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable

from waitfor.context import Context


@runtime_checkable
class ReadinessProbe(Protocol):
    """Интерфейс зонда. Один зонд = одна проверка одного ресурса.

    Зонды разных видов (файл, сокет, HTTP) не наследуются друг от друга:
    хост выбирает реализацию по схеме URI через `waitfor.registry.Registry`.
    """

    def test(self, ctx: Context) -> None:
        """Проверить готовность ресурса.

        Args:
            ctx: Контекст отмены и дедлайна от хоста.

        Raises:
            ContextError: Контекст уже завершён (тот же экземпляр, что `ctx.err()`).
            ResourceNotReady: Ресурс пока недоступен.
        """
        ...


#: Фабрика зонда: принимает URI (строку или разобранный URL), возвращает зонд
Factory = Callable[[Any], ReadinessProbe]

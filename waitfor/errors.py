"""Ошибки waitfor.

Ошибки завершённого контекста (`Canceled`, `DeadlineExceeded`) живут
в `waitfor.context` и никогда не оборачиваются.
"""

from __future__ import annotations

from typing import Optional


class WaitforError(RuntimeError):
    pass


class MissingResourceIdentifier(WaitforError, ValueError):
    """URI ресурса не передан. Ошибка конфигурации, повтор бесполезен."""

    def __init__(self, message: str = "resource identifier is missing") -> None:
        super().__init__(message)


class InvalidResourceIdentifier(WaitforError, ValueError):
    """URI ресурса не удаётся разобрать."""


class UnsupportedScheme(WaitforError, LookupError):
    """Для схемы URI не зарегистрирован зонд."""

    def __init__(self, scheme: str) -> None:
        super().__init__(f"unsupported resource scheme: {scheme!r}")
        self.scheme = scheme


class ResourceNotReady(WaitforError):
    """Ресурс пока недоступен. Хост может повторить проверку позже.

    Исходная ошибка доступна как `cause` и как `__cause__`.
    """

    def __init__(self, resource: str, cause: Optional[BaseException] = None) -> None:
        message = f"resource {resource!r} is not ready"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.resource = resource
        self.cause = cause

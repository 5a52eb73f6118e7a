"""Зонд file:// — проверяет, существует ли путь в локальной файловой системе."""

from __future__ import annotations

import logging
import os
from typing import Optional, Union
from urllib.parse import ParseResult, SplitResult

from waitfor.context import Context
from waitfor.errors import InvalidResourceIdentifier, MissingResourceIdentifier, ResourceNotReady
from waitfor.models import ResourceConfig

logger = logging.getLogger(__name__)

SCHEME = "file"
PREFIX = "file://"
# Путь получается отрезанием первых PREFIX_LEN символов строки URI, схема не проверяется
PREFIX_LEN = len(PREFIX)

URI = Union[str, SplitResult, ParseResult]


class FileProbe:
    """Проверяет существование пути (файла или директории)."""

    def __init__(self, path: str) -> None:
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def test(self, ctx: Context) -> None:
        """Проверить, существует ли путь прямо сейчас.

        Сначала проверяется контекст: уже отменённый или истёкший бюджет
        сообщается как есть, даже если файл существует.

        Args:
            ctx: Контекст отмены и дедлайна.

        Raises:
            ContextError: Контекст уже завершён; это экземпляр `ctx.err()`.
            ResourceNotReady: stat() не удался; исходная ошибка в `__cause__`.
        """
        err = ctx.err()
        if err is not None:
            raise err

        try:
            os.stat(self._path)
        except (OSError, ValueError) as exc:
            # ValueError — NUL-байт в пути
            logger.debug("stat %r: %s", self._path, exc)
            raise ResourceNotReady(self._path, exc) from exc

    def __repr__(self) -> str:
        return f"<FileProbe path={self._path!r}>"


def new(uri: Optional[URI]) -> FileProbe:
    """Создать зонд из URI вида `file:///abs/path`.

    Args:
        uri: Строка или разобранный URL (`urlsplit`/`urlparse`).

    Returns:
        Зонд с путём, равным строке URI без первых семи символов.

    Raises:
        MissingResourceIdentifier: uri не передан.
        InvalidResourceIdentifier: строка URI короче `file://` или uri не строка и не URL.
    """
    if uri is None:
        raise MissingResourceIdentifier()

    if isinstance(uri, str):
        raw = uri
    elif callable(getattr(uri, "geturl", None)):
        raw = uri.geturl()
    else:
        raise InvalidResourceIdentifier(
            f"resource identifier must be a string or a parsed URL, got {type(uri).__name__}"
        )

    if len(raw) < PREFIX_LEN:
        raise InvalidResourceIdentifier(
            f"resource identifier {raw!r} is shorter than {PREFIX!r}"
        )

    return FileProbe(raw[PREFIX_LEN:])


def use() -> ResourceConfig:
    """Привязка схемы `file` к `new` для `waitfor.registry.Registry`."""
    return ResourceConfig(schemes=[SCHEME], factory=new)

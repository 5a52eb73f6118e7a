"""Контекст отмены и дедлайна, который хост передаёт в зонды.

Контекст образует дерево: отмена родителя отменяет всех потомков тем же
экземпляром ошибки, дедлайн потомка не позже дедлайна родителя.
После завершения `err()` всегда возвращает один и тот же объект ошибки,
поэтому вызывающий может сравнивать его через `is`.
"""

from __future__ import annotations

import threading
import time
from typing import Optional


class ContextError(Exception):
    """Базовая ошибка завершённого контекста."""


class Canceled(ContextError):
    """Контекст отменён вызывающей стороной."""

    def __init__(self, message: str = "context canceled") -> None:
        super().__init__(message)


class DeadlineExceeded(ContextError, TimeoutError):
    """Дедлайн контекста истёк."""

    def __init__(self, message: str = "context deadline exceeded") -> None:
        super().__init__(message)


class Context:
    """Носитель отмены и дедлайна.

    Args:
        parent: Родительский контекст или None для корня.
        deadline: Собственный дедлайн в секундах `time.monotonic()`.
    """

    def __init__(self, parent: Optional[Context] = None, deadline: Optional[float] = None) -> None:
        self._parent = parent
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._err: Optional[ContextError] = None
        self._children: list[Context] = []

        parent_deadline = parent.deadline() if parent is not None else None
        if parent_deadline is not None and (deadline is None or parent_deadline < deadline):
            deadline = parent_deadline
        self._deadline = deadline

        if parent is not None:
            parent._attach(self)

    def deadline(self) -> Optional[float]:
        """Вернуть дедлайн (monotonic) или None, если его нет."""
        return self._deadline

    def remaining(self) -> Optional[float]:
        """Сколько секунд осталось до дедлайна (не меньше нуля)."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def err(self) -> Optional[ContextError]:
        """Вернуть ошибку завершения или None, пока контекст жив."""
        with self._lock:
            if self._err is not None:
                return self._err

        if self._parent is not None:
            parent_err = self._parent.err()
            if parent_err is not None:
                self._terminate(parent_err)
                return self._err

        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._terminate(DeadlineExceeded())

        return self._err

    def done(self) -> bool:
        return self.err() is not None

    def cancel(self) -> None:
        """Отменить контекст и всех потомков. Повторный вызов ничего не меняет."""
        self._terminate(Canceled())

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Подождать завершения контекста не дольше `timeout` секунд.

        Returns:
            True, если контекст завершён (отмена или дедлайн).
        """
        remaining = self.remaining()
        if remaining is not None and (timeout is None or remaining < timeout):
            timeout = remaining
        self._done.wait(timeout)
        return self.done()

    def _attach(self, child: Context) -> None:
        with self._lock:
            err = self._err
            if err is None:
                self._children.append(child)
        if err is not None:
            child._terminate(err)

    def _terminate(self, err: ContextError) -> None:
        with self._lock:
            if self._err is not None:
                return
            self._err = err
            children, self._children = self._children, []
        self._done.set()
        for child in children:
            child._terminate(err)
        if self._parent is not None:
            self._parent._detach(self)

    def _detach(self, child: Context) -> None:
        with self._lock:
            if child in self._children:
                self._children.remove(child)

    def __enter__(self) -> Context:
        return self

    def __exit__(self, *exc_info) -> None:
        self.cancel()

    def __repr__(self) -> str:
        state = type(self._err).__name__ if self._err is not None else "live"
        return f"<Context {state} deadline={self._deadline!r}>"


def background() -> Context:
    """Корневой контекст без дедлайна. Отменяется только явно."""
    return Context()


def with_cancel(parent: Context) -> Context:
    return Context(parent)


def with_deadline(parent: Context, deadline: float) -> Context:
    """Дочерний контекст с абсолютным дедлайном (секунды `time.monotonic()`)."""
    return Context(parent, deadline=deadline)


def with_timeout(parent: Context, seconds: float) -> Context:
    """Дочерний контекст, истекающий через `seconds` секунд.

    Неположительный таймаут даёт уже истёкший контекст.
    """
    return Context(parent, deadline=time.monotonic() + seconds)

"""Модели данных waitfor: ResourceConfig, Observation, Report."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field


class ResourceConfig(BaseModel):
    """Привязка схем URI к фабрике зонда. Её отдаёт `use()` каждого плагина."""

    model_config = ConfigDict(frozen=True)

    schemes: list[str] = Field(..., min_length=1, description="Схемы URI, например ['file']")
    factory: Callable[[Any], Any] = Field(..., description="Фабрика: URI → зонд")


class Observation(BaseModel):
    """Одно наблюдение за ресурсом: готов или нет на момент проверки."""

    uri: str = Field(..., description="URI ресурса")
    scheme: str = Field(..., description="Схема URI")
    ready: bool = Field(..., description="Ресурс готов")
    error: Optional[str] = Field(None, description="Текст ошибки, если не готов")
    error_type: Optional[str] = Field(None, description="Класс ошибки")
    attempt: int = Field(1, ge=1, description="Номер прохода, на котором получено наблюдение")
    ts: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Временная метка",
    )


class Report(BaseModel):
    """Отчёт о проверке набора ресурсов."""

    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None
    attempts: int = Field(0, ge=0, description="Число выполненных проходов")
    observations: list[Observation] = Field(default_factory=list)

    @property
    def ready(self) -> bool:
        """Все ресурсы готовы (пустой отчёт готовым не считается)."""
        return bool(self.observations) and all(o.ready for o in self.observations)

    def pending(self) -> list[Observation]:
        """Вернуть наблюдения за ещё не готовыми ресурсами."""
        return [o for o in self.observations if not o.ready]

    def by_scheme(self, scheme: str) -> list[Observation]:
        return [o for o in self.observations if o.scheme == scheme]

    def by_uri(self, uri: str) -> Optional[Observation]:
        return next((o for o in self.observations if o.uri == uri), None)

"""Параллельная проверка ресурсов через ThreadPoolExecutor."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from typing import Optional, Sequence
from urllib.parse import urlsplit

from probes.base import ReadinessProbe
from waitfor.context import Context, ContextError
from waitfor.errors import ResourceNotReady
from waitfor.models import Observation, Report
from waitfor.registry import Registry

logger = logging.getLogger(__name__)


def check_resources(
    registry: Registry,
    ctx: Context,
    uris: Sequence[str],
    max_workers: int = 8,
) -> Report:
    """Один проход: проверить все ресурсы параллельно.

    Args:
        registry: Реестр фабрик зондов.
        ctx: Контекст отмены и дедлайна.
        uris: URI ресурсов.
        max_workers: Максимальное число потоков.

    Returns:
        Отчёт с одним наблюдением на каждый URI.

    Raises:
        UnsupportedScheme, InvalidResourceIdentifier: URI не удалось разобрать
            (до запуска зондов).
        ContextError: Контекст завершился; ошибка не оборачивается.
    """
    report = Report()
    probes = _resolve_all(registry, uris)
    report.observations = _run_pass(probes, ctx, max_workers, attempt=1)
    report.attempts = 1 if probes else 0
    report.finished_at = datetime.now(timezone.utc)
    return report


def wait_for_resources(
    registry: Registry,
    ctx: Context,
    uris: Sequence[str],
    interval: float = 1.0,
    max_workers: int = 8,
    report: Optional[Report] = None,
) -> Report:
    """Проверять ресурсы, пока все не станут готовы или не завершится контекст.

    Готовые ресурсы повторно не проверяются. Отчёт обновляется после
    каждого прохода, поэтому переданный снаружи `report` после таймаута
    содержит последние наблюдения.

    Args:
        registry: Реестр фабрик зондов.
        ctx: Контекст, ограничивающий общее время ожидания.
        uris: URI ресурсов.
        interval: Пауза между проходами, секунды.
        max_workers: Максимальное число потоков.
        report: Отчёт для заполнения; по умолчанию создаётся новый.

    Returns:
        Отчёт, в котором все ресурсы готовы.

    Raises:
        ContextError: Контекст завершился раньше, чем ресурсы стали готовы.
    """
    if report is None:
        report = Report()
    probes = _resolve_all(registry, uris)
    latest: dict[str, Observation] = {}
    pending = list(probes)

    try:
        while pending:
            report.attempts += 1
            for observation in _run_pass(pending, ctx, max_workers, attempt=report.attempts):
                latest[observation.uri] = observation
            report.observations = [latest[uri] for uri, _ in probes if uri in latest]

            pending = [(uri, probe) for uri, probe in pending if not latest[uri].ready]
            if not pending:
                break

            logger.info(
                "Проход %d: не готово %d из %d",
                report.attempts, len(pending), len(probes),
            )
            if ctx.wait(interval):
                raise ctx.err()
    finally:
        report.finished_at = datetime.now(timezone.utc)

    return report


def _resolve_all(registry: Registry, uris: Sequence[str]) -> list[tuple[str, ReadinessProbe]]:
    """Построить зонды для всех URI. Дубликаты URI проверяются один раз."""
    probes: list[tuple[str, ReadinessProbe]] = []
    seen: set[str] = set()
    for uri in uris:
        if uri in seen:
            continue
        seen.add(uri)
        probes.append((uri, registry.resolve(uri)))
    return probes


def _run_pass(
    probes: Sequence[tuple[str, ReadinessProbe]],
    ctx: Context,
    max_workers: int,
    attempt: int,
) -> list[Observation]:
    if not probes:
        return []

    results: dict[str, Observation] = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(_run_one, probe, uri, ctx, attempt): uri
            for uri, probe in probes
        }

        for future in as_completed(futures):
            uri = futures[future]
            try:
                results[uri] = future.result()
            except ContextError:
                raise
            except Exception as exc:
                logger.error("[%s] ошибка зонда: %s", uri, exc)
                results[uri] = _observation(uri, attempt, exc)

    # Порядок наблюдений совпадает с порядком URI
    return [results[uri] for uri, _ in probes]


def _run_one(probe: ReadinessProbe, uri: str, ctx: Context, attempt: int) -> Observation:
    """Запустить один зонд и вернуть наблюдение."""
    logger.debug("Проверка %s (проход %d)", uri, attempt)
    try:
        probe.test(ctx)
    except ResourceNotReady as exc:
        logger.debug("[%s] не готов: %s", uri, exc)
        return _observation(uri, attempt, exc)

    logger.info("[%s] готов", uri)
    return _observation(uri, attempt)


def _observation(uri: str, attempt: int, exc: Exception | None = None) -> Observation:
    return Observation(
        uri=uri,
        scheme=urlsplit(uri).scheme,
        ready=exc is None,
        error=str(exc) if exc is not None else None,
        error_type=type(exc).__name__ if exc is not None else None,
        attempt=attempt,
    )

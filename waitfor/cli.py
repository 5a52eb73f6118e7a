"""CLI точка входа waitfor: команды `waitfor check` и `waitfor wait`."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import click

from probes import fs
from waitfor.context import ContextError, background, with_timeout
from waitfor.errors import InvalidResourceIdentifier, MissingResourceIdentifier, UnsupportedScheme
from waitfor.models import Report
from waitfor.registry import Registry
from waitfor.runner import check_resources, wait_for_resources

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

logger = logging.getLogger(__name__)

#: Код выхода, когда ресурсы не готовы после одного прохода
EXIT_NOT_READY = 1
#: Код выхода, когда истёк таймаут ожидания
EXIT_TIMEOUT = 2


def build_registry() -> Registry:
    """Точка сборки: явная таблица всех поддерживаемых схем."""
    return Registry(fs.use())


def _write_report(report: Report, out: Optional[str]) -> None:
    if not out:
        return
    out_file = Path(out)
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(
        json.dumps(report.model_dump(mode="json"), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    click.echo(f"Отчёт сохранён: {out_file}")


def _echo_report(report: Report) -> None:
    for observation in report.observations:
        status = "ready" if observation.ready else "not ready"
        line = f"{observation.uri}  {status}"
        if observation.error:
            line = f"{line}  ({observation.error})"
        click.echo(line)


@click.group(context_settings={"auto_envvar_prefix": "WAITFOR"})
@click.option("--verbose", "-v", is_flag=True, help="Подробный лог (DEBUG)")
def cli(verbose: bool) -> None:
    """waitfor — проверка готовности ресурсов (файлы и др.) по URI."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command()
@click.argument("uris", nargs=-1, required=True)
@click.option("--workers", default=8, show_default=True, type=click.IntRange(min=1),
              help="Число параллельных потоков")
@click.option("--out", "-o", default=None, help="JSON-файл для отчёта")
@click.pass_context
def check(ctx: click.Context, uris: tuple[str, ...], workers: int, out: Optional[str]) -> None:
    """Проверить ресурсы один раз."""
    registry = build_registry()
    try:
        report = check_resources(registry, background(), uris, max_workers=workers)
    except (InvalidResourceIdentifier, MissingResourceIdentifier, UnsupportedScheme) as exc:
        raise click.BadParameter(str(exc), param_hint="URIS") from exc

    _echo_report(report)
    _write_report(report, out)
    if not report.ready:
        ctx.exit(EXIT_NOT_READY)


@cli.command()
@click.argument("uris", nargs=-1, required=True)
@click.option("--timeout", "-t", default=30.0, show_default=True, type=float,
              help="Общий бюджет ожидания, секунды")
@click.option("--interval", "-i", default=1.0, show_default=True, type=float,
              help="Пауза между проходами, секунды")
@click.option("--workers", default=8, show_default=True, type=click.IntRange(min=1),
              help="Число параллельных потоков")
@click.option("--out", "-o", default=None, help="JSON-файл для отчёта")
@click.pass_context
def wait(
    ctx: click.Context,
    uris: tuple[str, ...],
    timeout: float,
    interval: float,
    workers: int,
    out: Optional[str],
) -> None:
    """Ждать, пока все ресурсы станут готовы."""
    if interval <= 0:
        raise click.BadParameter("interval must be positive", param_hint="--interval")

    registry = build_registry()
    click.echo(f"Ожидание {len(uris)} ресурсов, таймаут {timeout:g} с")

    report = Report()
    with with_timeout(background(), timeout) as budget:
        try:
            wait_for_resources(
                registry, budget, uris, interval=interval, max_workers=workers, report=report,
            )
        except (InvalidResourceIdentifier, MissingResourceIdentifier, UnsupportedScheme) as exc:
            raise click.BadParameter(str(exc), param_hint="URIS") from exc
        except ContextError as exc:
            logger.error("Ресурсы не готовы: %s", exc)
            _echo_report(report)
            _write_report(report, out)
            ctx.exit(EXIT_TIMEOUT)

    _echo_report(report)
    _write_report(report, out)

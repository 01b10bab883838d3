from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict
from pathlib import Path
from typing import Callable

import typer

from minter.common.run_id import generate_run_id
from minter.common.sanitize import maskSecret, maskSecretsInObject
from minter.common.time import getDurationMs
from minter.config import Settings, load_settings
from minter.domain.config_resolver import ConfigResolver
from minter.domain.error_codes import ErrorCode
from minter.domain.exceptions import ConfigMissingError
from minter.domain.models import ServiceDataConfig
from minter.domain.payload_builder import PayloadBuilder
from minter.infra.artifacts.report_writer import MintReport, writeReportJson
from minter.infra.clients.base import HttpMintClient
from minter.infra.clients.registry import create_mint_client
from minter.infra.config.store import YamlConfigStore
from minter.infra.entity.dict_entity import JsonFileEntity
from minter.infra.logging.setup import closeLogger, createCommandLogger, logEvent
from minter.usecases.mint_usecase import MintOrchestrator

app = typer.Typer(no_args_is_help=True, add_completion=False)


def ensureDir(path: str) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def loadStore(settings: Settings) -> YamlConfigStore:
    """
    Назначение:
        Открывает YAML-хранилище identifier/data_profile/service_data.

    Поведение:
        - Если путь не задан или файл не читается: exit code 2.
    """
    if not settings.config_store:
        typer.echo("ERROR: --config-store is required", err=True)
        raise typer.Exit(code=2)
    try:
        return YamlConfigStore(settings.config_store)
    except (OSError, ValueError) as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=2)


def makeClientFactory(settings: Settings) -> Callable[[ServiceDataConfig], HttpMintClient]:
    def factory(serviceData: ServiceDataConfig) -> HttpMintClient:
        return create_mint_client(
            serviceData,
            username=settings.service_username,
            password=settings.service_password,
            timeout_seconds=settings.timeout_seconds,
            tls_skip_verify=settings.tls_skip_verify,
            ca_file=settings.ca_file,
        )

    return factory


def printRunHeader(runId: str, command: str, settings: Settings, sources: list[str]) -> None:
    """Печатает безопасную сводку параметров запуска (без секретов)."""
    typer.echo(
        f"run_id={runId} command={command} config_store={settings.config_store} "
        f"service_username={settings.service_username} "
        f"service_password={maskSecret(settings.service_password)} "
        f"strict_profile={settings.strict_profile} sources={sources}"
    )


def runMintCommand(ctx: typer.Context, entityPaths: list[str], identifierType: str) -> None:
    """
    Назначение:
        Выпуск идентификаторов для набора JSON-сущностей.

    Поведение:
        - Каждая сущность обрабатывается отдельной транзакцией; ошибка одной
          не прерывает остальные.
        - exit code: 0 если все выпущены, 1 при ошибках, 2 без входных данных.
        - Отчёт пишется всегда (report_dir/mint_<run_id>.json).
    """
    runId = ctx.obj["runId"]
    settings: Settings = ctx.obj["settings"]
    sources = ctx.obj["sources"]

    store = loadStore(settings)
    startMonotonic = time.monotonic()
    logger, logFilePath = createCommandLogger("mint", settings.log_dir, runId, settings.log_level)
    report = MintReport(runId, "mint", configSources=sources)
    exitCode = 0

    try:
        logEvent(logger, logging.INFO, runId, "core", "Command started")
        printRunHeader(runId, "mint", settings, sources)

        orchestrator = MintOrchestrator(
            ConfigResolver(store),
            makeClientFactory(settings),
            payload_builder=PayloadBuilder(strict=settings.strict_profile),
            logger=logger,
            run_id=runId,
        )

        loaded: list[tuple[str, JsonFileEntity]] = []
        for entityPath in entityPaths:
            try:
                loaded.append((entityPath, JsonFileEntity(entityPath)))
            except (OSError, ValueError) as exc:
                logEvent(logger, logging.ERROR, runId, "entity", f"Cannot load entity {entityPath}: {exc}")
                report.add_failure(entityPath, identifierType, ErrorCode.INVALID_TARGET.value, str(exc))
                typer.echo(f"FAILED {entityPath} {ErrorCode.INVALID_TARGET.value}: {exc}")
                exitCode = 1

        outcomes = orchestrator.execute_many([entity for _path, entity in loaded], identifierType)
        for (entityPath, _entity), outcome in zip(loaded, outcomes):
            report.add_outcome(entityPath, identifierType, outcome)
            if outcome.ok:
                typer.echo(f"MINTED {entityPath} {outcome.identifier}")
            else:
                typer.echo(f"FAILED {entityPath} {outcome.error_code.value}: {outcome.error_message}")
                exitCode = 1
    finally:
        report.set_context("runtime", {"log_file": logFilePath, "report_dir": settings.report_dir})
        report.finish(durationMs=getDurationMs(startMonotonic, time.monotonic()))
        reportPath = writeReportJson(report, settings.report_dir, f"mint_{runId}")
        logEvent(logger, logging.INFO, runId, "report", f"Report written: {reportPath}")
        closeLogger(logger)

    typer.echo(
        f"minted={report.summary['minted']} failed={report.summary['failed']} report={reportPath}"
    )
    raise typer.Exit(code=exitCode)


@app.callback()
def main(
    ctx: typer.Context,
    config: str | None = typer.Option(None, "--config", help="Path to config.yml"),
    runId: str | None = typer.Option(None, "--run-id", help="Run identifier. If omitted, generated."),
    configStore: str | None = typer.Option(None, "--config-store", help="YAML with identifier/data_profile/service_data"),
    serviceUsername: str | None = typer.Option(None, "--service-username", help="Identifier service username"),
    servicePassword: str | None = typer.Option(None, "--service-password", help="Identifier service password (avoid; use env)"),
    timeoutSeconds: float | None = typer.Option(None, "--timeout-seconds", help="HTTP timeout in seconds"),
    tlsSkipVerify: bool | None = typer.Option(None, "--tls-skip-verify", help="Disable TLS verification"),
    caFile: str | None = typer.Option(None, "--ca-file", help="CA file path"),
    strictProfile: bool | None = typer.Option(
        None,
        "--strict-profile/--no-strict-profile",
        help="Fail when a data profile source field is missing on the entity",
    ),
    logLevel: str | None = typer.Option(None, "--log-level", help="Log level: ERROR|WARN|INFO|DEBUG"),
    logDir: str | None = typer.Option(None, "--log-dir", help="Directory for logs."),
    reportDir: str | None = typer.Option(None, "--report-dir", help="Directory for reports."),
):
    """
    Назначение:
        Глобальная инициализация CLI: run_id, настройки (CLI > ENV > config > defaults),
        каталоги log/report; всё сохраняется в ctx.obj для подкоманд.
    """
    if not runId:
        runId = generate_run_id()

    cliOverrides = {
        "config_store": configStore,
        "service_username": serviceUsername,
        "service_password": servicePassword,
        "timeout_seconds": timeoutSeconds,
        "tls_skip_verify": tlsSkipVerify,
        "ca_file": caFile,
        "strict_profile": strictProfile,
        "log_level": logLevel,
        "log_dir": logDir,
        "report_dir": reportDir,
    }
    try:
        loaded = load_settings(config_path=config, cli_overrides=cliOverrides)
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=2)

    ensureDir(loaded.settings.log_dir)
    ensureDir(loaded.settings.report_dir)

    ctx.obj = {
        "runId": runId,
        "settings": loaded.settings,
        "sources": loaded.sources_used,
        "configPath": config,
    }


@app.command()
def mint(
    ctx: typer.Context,
    entities: list[str] = typer.Argument(..., help="Entity JSON files ({id, url, fields})"),
    identifierType: str = typer.Option(..., "--identifier-type", help="Identifier config id (identifier.<id>)"),
):
    runMintCommand(ctx, entities, identifierType)


@app.command("show-config")
def showConfig(
    ctx: typer.Context,
    identifierType: str = typer.Argument(..., help="Identifier config id"),
):
    """Показывает identifier + data profile + service data (секреты скрыты)."""
    settings: Settings = ctx.obj["settings"]
    resolver = ConfigResolver(loadStore(settings))
    try:
        configs = resolver.resolve(identifierType)
        serviceData = resolver.resolve_service(configs.identifier)
    except ConfigMissingError as exc:
        typer.echo(f"ERROR: {exc.message}", err=True)
        raise typer.Exit(code=2)

    data = {
        "identifier": asdict(configs.identifier),
        "data_profile": {
            "id": configs.data_profile.id,
            "label": configs.data_profile.label,
            "entity": configs.data_profile.entity_type,
            "bundle": configs.data_profile.bundle,
            "entries": [asdict(entry) for entry in configs.data_profile.entries()],
        },
        "service_data": maskSecretsInObject(asdict(serviceData)),
    }
    typer.echo(json.dumps(data, ensure_ascii=False, indent=2))

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from minter.common.time import getNowIso
from minter.domain.models import MintOutcome


@dataclass
class MintReportItem:
    status: str
    entity: str
    identifier_type: str
    identifier: str | None = None
    error_code: str | None = None
    error_message: str | None = None
    warnings: list[str] = field(default_factory=list)
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class MintReportMeta:
    run_id: str
    command: str
    started_at: str
    finished_at: str | None = None
    duration_ms: int | None = None


class MintReport:
    """
    Назначение/ответственность:
        Сборщик отчёта команды mint: по одной записи на сущность + счётчики.
    """

    def __init__(self, run_id: str, command: str, configSources: list[str] | None = None) -> None:
        self.meta = MintReportMeta(run_id=run_id, command=command, started_at=getNowIso())
        self.summary: dict[str, int] = {"total": 0, "minted": 0, "failed": 0, "with_warnings": 0}
        self.items: list[MintReportItem] = []
        self.context: dict[str, Any] = {}
        if configSources:
            self.context["config"] = {"sources": configSources}

    def add_outcome(self, entity: str, identifier_type: str, outcome: MintOutcome) -> None:
        self.summary["total"] += 1
        self.summary["minted" if outcome.ok else "failed"] += 1
        if outcome.warnings:
            self.summary["with_warnings"] += 1
        self.items.append(
            MintReportItem(
                status=outcome.status.value,
                entity=entity,
                identifier_type=identifier_type,
                identifier=outcome.identifier,
                error_code=outcome.error_code.value if outcome.error_code else None,
                error_message=outcome.error_message,
                warnings=[w.value for w in outcome.warnings],
                details=outcome.details,
            )
        )

    def add_failure(self, entity: str, identifier_type: str, code: str, message: str) -> None:
        """Сущность не удалось даже загрузить: учитывается как FAILED."""
        self.summary["total"] += 1
        self.summary["failed"] += 1
        self.items.append(
            MintReportItem(
                status="FAILED",
                entity=entity,
                identifier_type=identifier_type,
                error_code=code,
                error_message=message,
            )
        )

    def set_context(self, name: str, value: dict[str, Any]) -> None:
        self.context[name] = value

    def finish(self, durationMs: int | None = None) -> None:
        self.meta.finished_at = getNowIso()
        self.meta.duration_ms = durationMs

    @property
    def status(self) -> str:
        if self.summary["failed"] == 0:
            return "SUCCESS"
        if self.summary["minted"] > 0:
            return "PARTIAL"
        return "FAILED"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "meta": asdict(self.meta),
            "summary": dict(self.summary),
            "items": [asdict(item) for item in self.items],
            "context": self.context,
        }


def writeReportJson(report: MintReport, reportDir: str, fileBaseName: str) -> str:
    """
    Назначение:
        Записывает отчёт на диск.

    Выходные данные:
        str
            Путь к файлу отчёта.
    """
    Path(reportDir).mkdir(parents=True, exist_ok=True)
    reportPath = str(Path(reportDir) / f"{fileBaseName}.json")

    with open(reportPath, "w", encoding="utf-8") as f:
        json.dump(report.to_dict(), f, ensure_ascii=False, indent=2)

    return reportPath

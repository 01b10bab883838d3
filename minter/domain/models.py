from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Mapping

from minter.domain.error_codes import ErrorCode
from minter.domain.exceptions import ConfigMissingError

MintPayload = dict[str, str]


@dataclass(frozen=True)
class IdentifierConfig:
    """
    Назначение:
        Настройка типа идентификатора: в какое поле сущности записывать результат
        и какой data profile / service data использовать.
    Инварианты/гарантии:
        - Неизменяема в рамках транзакции.
        - data_profile указывает на DataProfileConfig.id.
    """

    id: str
    entity_type: str
    bundle: str
    field: str
    data_profile: str
    service_data: str | None = None

    @classmethod
    def from_record(cls, config_id: str, record: Mapping[str, Any]) -> "IdentifierConfig":
        return cls(
            id=config_id,
            entity_type=str(record.get("entity") or ""),
            bundle=str(record.get("bundle") or ""),
            field=str(record.get("field") or ""),
            data_profile=str(record.get("data_profile") or config_id),
            service_data=record.get("service_data") or None,
        )


@dataclass(frozen=True)
class ProfileEntry:
    index: int
    source_field: str
    key: str


@dataclass(frozen=True)
class DataProfileConfig:
    """
    Назначение:
        Декларативный маппинг полей сущности в ключи payload внешнего сервиса.
    Ограничения:
        data хранится «как в конфиге»: список или mapping index -> entry.
        Некорректные записи отбрасываются в entries(), а не при загрузке.
    """

    id: str
    entity_type: str = ""
    bundle: str = ""
    label: str = ""
    data: Any = None

    @classmethod
    def from_record(cls, config_id: str, record: Mapping[str, Any]) -> "DataProfileConfig":
        return cls(
            id=config_id,
            entity_type=str(record.get("entity") or ""),
            bundle=str(record.get("bundle") or ""),
            label=str(record.get("label") or config_id),
            data=record.get("data"),
        )

    def entries(self) -> Iterator[ProfileEntry]:
        """
        Назначение:
            Итерация по записям маппинга в порядке конфигурации.
        Алгоритм:
            - list: индекс = позиция.
            - mapping: индекс должен быть целым числом или числовой строкой, иначе запись пропускается.
            - тело записи должно быть mapping с непустыми source_field и key.
        """
        if isinstance(self.data, Mapping):
            items = list(self.data.items())
        elif isinstance(self.data, (list, tuple)):
            items = list(enumerate(self.data))
        else:
            return

        for raw_index, value in items:
            index = _parse_index(raw_index)
            if index is None or not isinstance(value, Mapping):
                continue
            source_field = value.get("source_field")
            key = value.get("key")
            if not isinstance(source_field, str) or not source_field.strip():
                continue
            if not isinstance(key, str) or not key.strip():
                continue
            yield ProfileEntry(index=index, source_field=source_field.strip(), key=key.strip())


def _parse_index(raw: Any) -> int | None:
    """
    Числовой индекс записи маппинга: число или числовая строка
    ('3', '-1', ' 2.0 '). Строка и число обрабатываются одинаково.
    Дробные индексы ('1.5') не принимаются: индекс записи целый.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        number = raw
    elif isinstance(raw, str):
        try:
            number = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    if not number.is_integer():
        return None
    return int(number)


@dataclass(frozen=True)
class ServiceDataConfig:
    """
    Назначение:
        Параметры подключения к сервису регистрации идентификаторов.
    """

    id: str
    service: str
    host: str
    username: str | None = None
    password: str | None = None
    shoulder: str | None = None
    prefix: str | None = None
    timeout_seconds: float | None = None

    @classmethod
    def from_record(cls, config_id: str, record: Mapping[str, Any]) -> "ServiceDataConfig":
        return cls(
            id=config_id,
            service=str(record.get("service") or "").strip().lower(),
            host=str(record.get("host") or "").rstrip("/"),
            username=record.get("username"),
            password=record.get("password"),
            shoulder=record.get("shoulder"),
            prefix=record.get("prefix"),
            timeout_seconds=_parse_timeout(config_id, record.get("timeout_seconds")),
        )


def _parse_timeout(config_id: str, raw: Any) -> float | None:
    if raw is None:
        return None
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        key = f"service_data.{config_id}.timeout_seconds"
        raise ConfigMissingError(key, f"Configuration '{key}' is not a number: {raw!r}") from exc


@dataclass(frozen=True)
class ResolvedConfigs:
    identifier: IdentifierConfig
    data_profile: DataProfileConfig


class MintStatus(str, Enum):
    MINTED = "MINTED"
    FAILED = "FAILED"


@dataclass
class MintOutcome:
    """
    Назначение:
        Результат одной транзакции mint, возвращаемый вызывающему коду.
    Инварианты/гарантии:
        - MINTED: identifier задан, error_code None.
        - FAILED: error_code задан; identifier может быть в details
          (orphaned_identifier), но не в identifier.
        - warnings: деградации, не прервавшие транзакцию (например PAYLOAD_EMPTY).
    """

    status: MintStatus
    identifier: str | None = None
    error_code: ErrorCode | None = None
    error_message: str | None = None
    warnings: list[ErrorCode] = field(default_factory=list)
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def minted(cls, identifier: str, warnings: list[ErrorCode] | None = None) -> "MintOutcome":
        return cls(status=MintStatus.MINTED, identifier=identifier, warnings=list(warnings or []))

    @classmethod
    def failed(
        cls,
        code: ErrorCode,
        message: str,
        *,
        warnings: list[ErrorCode] | None = None,
        details: dict[str, Any] | None = None,
    ) -> "MintOutcome":
        return cls(
            status=MintStatus.FAILED,
            error_code=code,
            error_message=message,
            warnings=list(warnings or []),
            details=dict(details or {}),
        )

    @property
    def ok(self) -> bool:
        return self.status == MintStatus.MINTED

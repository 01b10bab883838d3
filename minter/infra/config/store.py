from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml

from minter.domain.ports.config_store import ConfigStoreProtocol


class DictConfigStore(ConfigStoreProtocol):
    """
    Назначение:
        In-memory хранилище конфигурации для тестов/ручных сценариев.
    Алгоритм:
        Ключи принимаются как плоские ('identifier.doi') или вложенные
        ({'identifier': {'doi': {...}}}); внутри всё хранится плоско.
    """

    def __init__(self, records: Mapping[str, Any] | None = None):
        self._records: dict[str, dict[str, Any]] = _flatten(records or {})

    def get(self, key: str) -> Mapping[str, Any] | None:
        return self._records.get(key)


class YamlConfigStore(DictConfigStore):
    """
    Назначение:
        Хранилище конфигурации из YAML-файла (identifier/data_profile/service_data).
    Ограничения:
        Файл читается один раз при создании.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(_read_yaml(self.path))


def _read_yaml(path: Path) -> dict:
    if not path.exists() or not path.is_file():
        raise FileNotFoundError(f"Config store not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Config store is not valid YAML: {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Config store must be a mapping: {path}")
    return data


def _flatten(records: Mapping[str, Any]) -> dict[str, dict[str, Any]]:
    flat: dict[str, dict[str, Any]] = {}
    for key, value in records.items():
        if not isinstance(value, Mapping):
            continue
        if "." in str(key):
            flat[str(key)] = dict(value)
            continue
        # namespace: {id: record}
        for config_id, record in value.items():
            if isinstance(record, Mapping):
                flat[f"{key}.{config_id}"] = dict(record)
    return flat


__all__ = ["DictConfigStore", "YamlConfigStore"]

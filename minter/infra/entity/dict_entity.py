from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Mapping


class DictEntity:
    """
    Назначение:
        Адаптер FieldAccessorProtocol/LinkedEntityProtocol над словарём полей.
    Взаимодействия:
        on_save вызывается из save(); исключение из него пробрасывается
        (так хранилище сообщает об ошибке валидации/записи).
    """

    def __init__(
        self,
        fields: Mapping[str, Any] | None = None,
        *,
        entity_id: str | None = None,
        url: str | None = None,
        on_save: Callable[["DictEntity"], None] | None = None,
    ):
        self.fields: dict[str, Any] = dict(fields or {})
        self._entity_id = entity_id
        self._url = url
        self._on_save = on_save
        self.save_count = 0

    def has_field(self, name: str) -> bool:
        return name in self.fields

    def get_string(self, name: str) -> str:
        value = self.fields.get(name)
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return ", ".join(str(v) for v in value if v is not None)
        return str(value)

    def set(self, name: str, value: str) -> None:
        self.fields[name] = value

    def save(self) -> None:
        if self._on_save is not None:
            self._on_save(self)
        self.save_count += 1

    def entity_id(self) -> str:
        return self._entity_id or ""

    def entity_url(self) -> str:
        if not self._url:
            raise ValueError("Entity has no canonical URL")
        return self._url


class JsonFileEntity(DictEntity):
    """
    Назначение:
        Сущность, хранящаяся JSON-документом {"id", "url", "fields": {...}}.
        save() перезаписывает файл целиком.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        with self.path.open("r", encoding="utf-8") as f:
            doc = json.load(f)
        if not isinstance(doc, dict) or not isinstance(doc.get("fields"), dict):
            raise ValueError(f"Entity document must contain a 'fields' object: {self.path}")
        self._doc = doc
        super().__init__(
            doc["fields"],
            entity_id=str(doc["id"]) if doc.get("id") is not None else self.path.stem,
            url=doc.get("url"),
            on_save=JsonFileEntity._write,
        )

    def _write(self) -> None:
        doc = dict(self._doc)
        doc["fields"] = self.fields
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(doc, f, ensure_ascii=False, indent=2)
        tmp.replace(self.path)
        self._doc = doc


__all__ = ["DictEntity", "JsonFileEntity"]

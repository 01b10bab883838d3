from __future__ import annotations

from typing import Any, Mapping, Protocol


class ConfigStoreProtocol(Protocol):
    """
    Назначение:
        Порт чтения конфигурационных записей по полному ключу
        (identifier.<id>, data_profile.<id>, service_data.<id>).
    Ограничения:
        Только чтение; ядро никогда не пишет конфигурацию.
    """

    def get(self, key: str) -> Mapping[str, Any] | None: ...


__all__ = ["ConfigStoreProtocol"]

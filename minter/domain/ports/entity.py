from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FieldAccessorProtocol(Protocol):
    """
    Назначение:
        Узкий контракт доступа к полям сущности внешнего хранилища.
    Взаимодействия:
        Ядро держит ссылку только на время одной транзакции и никогда
        не создаёт/удаляет сущности.
    Контракт:
        - has_field(name) -> bool
        - get_string(name) -> str
        - set(name, value), save(); save может бросить исключение хранилища.
    """

    def has_field(self, name: str) -> bool: ...
    def get_string(self, name: str) -> str: ...
    def set(self, name: str, value: str) -> None: ...
    def save(self) -> None: ...


@runtime_checkable
class LinkedEntityProtocol(Protocol):
    """
    Назначение:
        Необязательная возможность сущности: стабильный id и внешний URL.
        Нужна протоколам, которые регистрируют target URL или строят suffix.
    Ошибки/исключения:
        entity_url() может бросить исключение, если URL не строится.
    """

    def entity_id(self) -> str: ...
    def entity_url(self) -> str: ...


__all__ = ["FieldAccessorProtocol", "LinkedEntityProtocol"]

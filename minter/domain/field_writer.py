from __future__ import annotations

from minter.domain.exceptions import NoIdentifierError, NoSuchFieldError, PersistFailedError
from minter.domain.ports.entity import FieldAccessorProtocol


class FieldWriter:
    """
    Назначение/ответственность:
        Записывает выпущенный идентификатор в настроенное поле и сохраняет сущность.
    Ограничения:
        - Компенсации нет: при PersistFailedError идентификатор во внешнем
          сервисе остаётся выпущенным.
    """

    def write(self, entity: FieldAccessorProtocol, field: str, identifier: str) -> None:
        if not identifier:
            raise NoIdentifierError()
        if not field or not entity.has_field(field):
            raise NoSuchFieldError(field or "")

        entity.set(field, identifier)
        try:
            entity.save()
        except Exception as exc:
            raise PersistFailedError(field, identifier, str(exc) or exc.__class__.__name__) from exc


__all__ = ["FieldWriter"]

from __future__ import annotations

from minter.domain.exceptions import PayloadError
from minter.domain.models import DataProfileConfig, MintPayload
from minter.domain.ports.entity import FieldAccessorProtocol


def build_payload(
    profile: DataProfileConfig | None,
    entity: FieldAccessorProtocol | None,
    *,
    strict: bool = False,
) -> MintPayload:
    """
    Назначение:
        Строит payload запроса по data profile для одной сущности.
    Контракт:
        - Порядок ключей = порядок записей профиля.
        - Поля, которых нет у сущности, пропускаются (strict=False)
          либо дают PayloadError (strict=True).
        - Отсутствие profile/entity -> пустой payload без исключения.
    """
    payload: MintPayload = {}
    if profile is None or entity is None:
        return payload

    for entry in profile.entries():
        if not entity.has_field(entry.source_field):
            if strict:
                raise PayloadError(entry.source_field)
            continue
        payload[entry.key] = entity.get_string(entry.source_field)
    return payload


class PayloadBuilder:
    def __init__(self, strict: bool = False):
        self.strict = strict

    def build(self, profile: DataProfileConfig | None, entity: FieldAccessorProtocol | None) -> MintPayload:
        return build_payload(profile, entity, strict=self.strict)


__all__ = ["PayloadBuilder", "build_payload"]

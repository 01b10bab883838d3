from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from minter.domain.models import MintPayload
from minter.domain.ports.entity import FieldAccessorProtocol
from minter.domain.ports.execution import RequestSpec


@dataclass(frozen=True)
class MintResponse:
    """
    Назначение:
        Ответ сервиса на запрос mint; потребляется один раз extract_identifier.
    """

    status_code: int
    text: str
    headers: dict[str, str] = field(default_factory=dict)


class MintClientProtocol(Protocol):
    """
    Назначение/ответственность:
        Стратегия одного протокола регистрации идентификаторов (EZID, Handle).
    Ограничения:
        - Без состояния между вызовами, без ретраев: один HTTP-запрос на mint.
    Ошибки/исключения:
        - send: ServiceConnectionError / ServiceTimeoutError / BadResponseError.
        - extract_identifier: MalformedResponseError.
        - build_request: InvalidTargetError, если сущность не даёт нужный id/URL.
    """

    service: str

    def build_request(self, payload: MintPayload, entity: FieldAccessorProtocol) -> RequestSpec: ...
    def send(self, request: RequestSpec) -> MintResponse: ...
    def extract_identifier(self, response: MintResponse) -> str: ...
    def mint(self, payload: MintPayload, entity: FieldAccessorProtocol) -> MintResponse: ...


__all__ = ["MintClientProtocol", "MintResponse"]

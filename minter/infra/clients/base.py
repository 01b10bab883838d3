from __future__ import annotations

from abc import ABC, abstractmethod

from minter.common.sanitize import truncateText
from minter.domain.exceptions import BadResponseError, InvalidTargetError
from minter.domain.models import MintPayload, ServiceDataConfig
from minter.domain.ports.entity import FieldAccessorProtocol, LinkedEntityProtocol
from minter.domain.ports.execution import RequestSpec
from minter.domain.ports.mint_client import MintResponse
from minter.infra.http.service_client import ServiceApiClient


class HttpMintClient(ABC):
    """
    Назначение/ответственность:
        Общая часть MintClient: отправка RequestSpec и проверка статуса.
        Наследники реализуют build_request и extract_identifier.
    """

    service = ""

    def __init__(self, service_data: ServiceDataConfig, http: ServiceApiClient):
        self.service_data = service_data
        self.http = http

    @abstractmethod
    def build_request(self, payload: MintPayload, entity: FieldAccessorProtocol) -> RequestSpec:
        ...

    @abstractmethod
    def extract_identifier(self, response: MintResponse) -> str:
        ...

    def send(self, request: RequestSpec) -> MintResponse:
        resp = self.http.requestRaw(
            request.method,
            request.path,
            params=request.query,
            json=request.json,
            content=request.content,
            headers=request.headers,
        )
        if resp.status_code not in request.expected_statuses:
            raise BadResponseError(resp.status_code, truncateText(resp.text or None, 200))
        return MintResponse(status_code=resp.status_code, text=resp.text, headers=dict(resp.headers))

    def mint(self, payload: MintPayload, entity: FieldAccessorProtocol) -> MintResponse:
        request = self.build_request(payload, entity)
        return self.send(request)

    def close(self) -> None:
        self.http.close()

    @staticmethod
    def _entity_url(entity: FieldAccessorProtocol, *, required: bool) -> str | None:
        if not isinstance(entity, LinkedEntityProtocol):
            if required:
                raise InvalidTargetError("Entity does not expose an URL")
            return None
        try:
            url = entity.entity_url()
        except Exception as exc:
            if not required:
                return None
            raise InvalidTargetError(f"Error retrieving entity URL: {exc}") from exc
        if not url:
            if required:
                raise InvalidTargetError("Entity URL is empty")
            return None
        return url

    @staticmethod
    def _entity_id(entity: FieldAccessorProtocol) -> str:
        if not isinstance(entity, LinkedEntityProtocol):
            raise InvalidTargetError("Entity does not expose an id")
        entity_id = entity.entity_id()
        if not entity_id:
            raise InvalidTargetError("Entity id is empty")
        return str(entity_id)

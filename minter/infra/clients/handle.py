from __future__ import annotations

import json

from minter.common.sanitize import truncateText
from minter.domain.exceptions import InvalidTargetError, MalformedResponseError
from minter.domain.models import MintPayload
from minter.domain.ports.entity import FieldAccessorProtocol
from minter.domain.ports.execution import RequestSpec
from minter.domain.ports.mint_client import MintResponse
from minter.infra.clients.base import HttpMintClient

HANDLE_RESOLVER = "https://hdl.handle.net"
HANDLE_SUCCESS = 1


class HandleMintClient(HttpMintClient):
    """
    Назначение/ответственность:
        Регистрация Handle через Handle.net REST API.
    Протокол:
        - PUT {host}/api/handles/{prefix}/{entity_id}?overwrite=false, JSON.
        - Значение index=1 типа URL указывает на сущность; остальные
          ключи payload добавляются как строковые значения.
        - Успех: {"responseCode": 1, "handle": "prefix/suffix"}.
    """

    service = "handle"

    def build_request(self, payload: MintPayload, entity: FieldAccessorProtocol) -> RequestSpec:
        prefix = (self.service_data.prefix or "").strip("/")
        if not prefix:
            raise InvalidTargetError(f"Handle prefix is not configured for '{self.service_data.id}'")
        suffix = self._entity_id(entity)
        url = self._entity_url(entity, required=True)

        values = [{"index": 1, "type": "URL", "data": {"format": "string", "value": url}}]
        for offset, (key, value) in enumerate(payload.items(), start=2):
            values.append({"index": offset, "type": key, "data": {"format": "string", "value": value}})

        return RequestSpec.put(
            f"/api/handles/{prefix}/{suffix}",
            json={"values": values},
            query={"overwrite": "false"},
            headers={"Accept": "application/json"},
        )

    def extract_identifier(self, response: MintResponse) -> str:
        snippet = truncateText(response.text or None, 200)
        try:
            data = json.loads(response.text) if response.text else None
        except ValueError as exc:
            raise MalformedResponseError("Handle response is not valid JSON", body_snippet=snippet) from exc
        if not isinstance(data, dict):
            raise MalformedResponseError("Handle response is not a JSON object", body_snippet=snippet)
        if data.get("responseCode") != HANDLE_SUCCESS:
            raise MalformedResponseError(
                f"Handle responseCode is {data.get('responseCode')!r}",
                body_snippet=snippet,
            )
        handle = data.get("handle")
        if not isinstance(handle, str) or not handle.strip():
            raise MalformedResponseError("Handle response has no 'handle'", body_snippet=snippet)
        return f"{HANDLE_RESOLVER}/{handle.strip()}"


__all__ = ["HandleMintClient"]

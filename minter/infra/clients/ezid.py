from __future__ import annotations

from minter.common.sanitize import truncateText
from minter.domain.anvl import encode_anvl, parse_anvl
from minter.domain.exceptions import InvalidTargetError, MalformedResponseError
from minter.domain.models import MintPayload
from minter.domain.ports.entity import FieldAccessorProtocol
from minter.domain.ports.execution import RequestSpec
from minter.domain.ports.mint_client import MintResponse
from minter.infra.clients.base import HttpMintClient

ANVL_CONTENT_TYPE = "text/plain; charset=UTF-8"
TARGET_KEY = "_target"


class EzidMintClient(HttpMintClient):
    """
    Назначение/ответственность:
        Выпуск ARK через EZID API.
    Протокол:
        - POST {host}/shoulder/{shoulder}, тело ANVL, HTTP Basic.
        - Успех: 'success: ark:/99999/fk4... [| doi:...]'.
        - Результат: '{host}/id/{ark}'.
    """

    service = "ezid"

    def build_request(self, payload: MintPayload, entity: FieldAccessorProtocol) -> RequestSpec:
        shoulder = (self.service_data.shoulder or "").strip("/")
        if not shoulder:
            raise InvalidTargetError(f"EZID shoulder is not configured for '{self.service_data.id}'")

        data = dict(payload)
        target = self._entity_url(entity, required=False)
        if target and TARGET_KEY not in data:
            data[TARGET_KEY] = target

        return RequestSpec.post(
            f"/shoulder/{shoulder}",
            content=encode_anvl(data),
            headers={"Content-Type": ANVL_CONTENT_TYPE, "Accept": "text/plain"},
        )

    def extract_identifier(self, response: MintResponse) -> str:
        parsed = parse_anvl(response.text)
        if parsed is None or not parsed.get("success"):
            raise MalformedResponseError(
                "EZID response has no 'success' marker",
                body_snippet=truncateText(response.text or None, 200),
            )
        # 'ark:/99999/fk4abc | doi:10.5072/FK2ABC' -> берём первый идентификатор
        ark = parsed["success"].split("|", 1)[0].strip()
        if not ark:
            raise MalformedResponseError("EZID response has an empty identifier")
        return f"{self.service_data.host}/id/{ark}"


__all__ = ["EzidMintClient"]

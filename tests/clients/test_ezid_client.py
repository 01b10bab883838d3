from __future__ import annotations

import base64

import httpx
import pytest

from minter.domain.error_codes import ErrorCode
from minter.domain.exceptions import BadResponseError, InvalidTargetError, MalformedResponseError
from minter.domain.models import ServiceDataConfig
from minter.domain.ports.execution import RequestSpec
from minter.domain.ports.mint_client import MintResponse
from minter.infra.clients.base import HttpMintClient
from minter.infra.clients.ezid import EzidMintClient
from minter.infra.clients.registry import create_mint_client
from minter.infra.entity.dict_entity import DictEntity

SERVICE = ServiceDataConfig(
    id="ezid",
    service="ezid",
    host="https://ezid.example",
    username="apitest",
    password="apitest-pass",
    shoulder="ark:/99999/fk4",
)


def make_client(handler) -> EzidMintClient:
    return create_mint_client(SERVICE, transport=httpx.MockTransport(handler))


def test_mint_posts_anvl_to_shoulder():
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = request.content.decode("utf-8")
        seen["content_type"] = request.headers["content-type"]
        seen["auth"] = request.headers["authorization"]
        return httpx.Response(201, text="success: ark:/99999/fk4xyz")

    client = make_client(handler)
    entity = DictEntity({"title": "My Thesis"}, entity_id="42", url="https://repo.example/node/42")

    response = client.mint({"erc.what": "My Thesis"}, entity)

    assert seen["method"] == "POST"
    assert seen["path"] == "/shoulder/ark:/99999/fk4"
    assert seen["body"] == "erc.what: My Thesis\n_target: https://repo.example/node/42"
    assert seen["content_type"].startswith("text/plain")
    assert seen["auth"] == "Basic " + base64.b64encode(b"apitest:apitest-pass").decode("ascii")
    assert client.extract_identifier(response) == "https://ezid.example/id/ark:/99999/fk4xyz"


def test_target_is_omitted_without_entity_url():
    def handler(request: httpx.Request) -> httpx.Response:
        assert "_target" not in request.content.decode("utf-8")
        return httpx.Response(201, text="success: ark:/99999/fk4xyz")

    client = make_client(handler)

    client.mint({"erc.what": "T"}, DictEntity({"title": "T"}))


def test_non_2xx_is_bad_response():
    client = make_client(lambda request: httpx.Response(400, text="error: bad request - no such shoulder"))

    with pytest.raises(BadResponseError) as exc:
        client.mint({"erc.what": "T"}, DictEntity({}))

    assert exc.value.error_code == ErrorCode.BAD_RESPONSE
    assert exc.value.status_code == 400
    assert "no such shoulder" in exc.value.body_snippet


def test_extract_takes_first_identifier_of_pair():
    client = make_client(lambda request: httpx.Response(201))
    response = MintResponse(status_code=201, text="success: ark:/99999/fk4abc | doi:10.5072/FK2ABC")

    assert client.extract_identifier(response) == "https://ezid.example/id/ark:/99999/fk4abc"


@pytest.mark.parametrize("body", ["", "error: bad request", "<html>maintenance</html>", "success: "])
def test_extract_without_success_marker_is_malformed(body):
    client = make_client(lambda request: httpx.Response(201))

    with pytest.raises(MalformedResponseError) as exc:
        client.extract_identifier(MintResponse(status_code=201, text=body))

    assert exc.value.error_code == ErrorCode.MALFORMED_RESPONSE


def test_missing_shoulder_is_invalid_target():
    service = ServiceDataConfig(id="ezid", service="ezid", host="https://ezid.example")
    client = create_mint_client(service, transport=httpx.MockTransport(lambda r: httpx.Response(201)))

    with pytest.raises(InvalidTargetError):
        client.build_request({"erc.what": "T"}, DictEntity({}))


def test_incomplete_client_variant_cannot_be_created():
    class NoParser(HttpMintClient):
        service = "incomplete"

        def build_request(self, payload, entity):
            return RequestSpec.post("/")

    with pytest.raises(TypeError):
        NoParser(SERVICE, http=None)

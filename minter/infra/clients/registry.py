from __future__ import annotations

import httpx

from minter.domain.exceptions import ConfigMissingError
from minter.domain.models import ServiceDataConfig
from minter.infra.clients.base import HttpMintClient
from minter.infra.clients.ezid import EzidMintClient
from minter.infra.clients.handle import HandleMintClient
from minter.infra.http.service_client import ServiceApiClient

MINT_CLIENTS: dict[str, type[HttpMintClient]] = {
    EzidMintClient.service: EzidMintClient,
    HandleMintClient.service: HandleMintClient,
}


def list_services() -> list[str]:
    return sorted(MINT_CLIENTS)


def _service_username(service_data: ServiceDataConfig, username: str | None) -> str | None:
    # Handle.net авторизует админ-handle вида 300:<prefix>/<user>.
    if service_data.service == HandleMintClient.service and username and ":" not in username:
        return f"300:{service_data.prefix}/{username}"
    return username


def create_mint_client(
    service_data: ServiceDataConfig,
    *,
    username: str | None = None,
    password: str | None = None,
    timeout_seconds: float = 20.0,
    tls_skip_verify: bool = False,
    ca_file: str | None = None,
    transport: httpx.BaseTransport | None = None,
) -> HttpMintClient:
    """
    Назначение:
        Создаёт MintClient нужного протокола по service_data.
    Контракт:
        - username/password из аргументов перекрывают значения из service_data.
        - Неизвестный service -> ConfigMissingError.
    """
    client_cls = MINT_CLIENTS.get(service_data.service)
    if client_cls is None:
        raise ConfigMissingError(
            f"service_data.{service_data.id}",
            f"Unsupported identifier service '{service_data.service}' (known: {', '.join(list_services())})",
        )
    if not service_data.host:
        raise ConfigMissingError(f"service_data.{service_data.id}", "Service host is not configured")

    http = ServiceApiClient(
        baseUrl=service_data.host,
        username=_service_username(service_data, username or service_data.username),
        password=password or service_data.password,
        timeoutSeconds=service_data.timeout_seconds or timeout_seconds,
        tlsSkipVerify=tls_skip_verify,
        caFile=ca_file,
        transport=transport,
    )
    return client_cls(service_data, http)

__all__ = ["MINT_CLIENTS", "create_mint_client", "list_services"]

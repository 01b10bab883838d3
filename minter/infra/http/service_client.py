from __future__ import annotations

from typing import Any

import httpx

from minter.domain.exceptions import ServiceConnectionError, ServiceTimeoutError


class ServiceApiClient:
    def __init__(
        self,
        baseUrl: str,
        username: str | None = None,
        password: str | None = None,
        timeoutSeconds: float = 20.0,
        tlsSkipVerify: bool = False,
        caFile: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Назначение:
            HTTP-клиент сервиса идентификаторов поверх httpx.Client.
        Контракт:
            - baseUrl обязателен; username/password -> HTTP Basic auth.
            - Одна попытка на запрос: ретраев нет, чтобы не выпустить
              идентификатор дважды.
            - Сетевые ошибки и таймауты превращаются в TransportError домена;
              статус ответа не проверяется (это делает MintClient).
        """
        if not baseUrl:
            raise ValueError("baseUrl is required")

        verify: bool | str = True
        if tlsSkipVerify:
            verify = False
        elif caFile:
            verify = caFile

        self.baseUrl = baseUrl.rstrip("/")
        self.username = username
        self.password = password
        self.timeoutSeconds = timeoutSeconds

        auth = httpx.BasicAuth(username, password or "") if username else None
        self.client = httpx.Client(
            base_url=self.baseUrl,
            timeout=timeoutSeconds,
            verify=verify,
            auth=auth,
            transport=transport,
        )

    def requestRaw(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any | None = None,
        content: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """
        Выполняет запрос и возвращает httpx.Response без проверки статуса.
        """
        try:
            return self.client.request(
                method,
                path,
                params=params or None,
                json=json,
                content=content.encode("utf-8") if content is not None else None,
                headers=headers,
            )
        except httpx.TimeoutException as exc:
            raise ServiceTimeoutError(f"Timeout after {self.timeoutSeconds}s: {method} {path}") from exc
        except httpx.TransportError as exc:
            raise ServiceConnectionError(f"Network error: {exc}") from exc

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "ServiceApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

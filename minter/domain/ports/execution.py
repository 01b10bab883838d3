from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Tuple

# Успешный статус сервиса: любой 2xx.
SUCCESS_STATUSES: Tuple[int, ...] = tuple(range(200, 300))


@dataclass
class RequestSpec:
    """
    Назначение/ответственность:
        Описывает запрос к сервису идентификаторов без привязки к HTTP-клиенту.
    Инварианты/гарантии:
        - method хранится в верхнем регистре.
        - задано не более одного тела: json или content.
        - expected_statuses непустой.
    """

    method: str
    path: str
    json: Any | None = None
    content: str | None = None
    query: dict[str, str] | None = None
    headers: dict[str, str] | None = None
    expected_statuses: Tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        self.method = self.method.upper()
        if not self.expected_statuses:
            raise ValueError("expected_statuses must not be empty")
        if self.json is not None and self.content is not None:
            raise ValueError("json and content are mutually exclusive")

    @classmethod
    def post(
        cls,
        path: str,
        *,
        json: Any | None = None,
        content: str | None = None,
        query: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        expected_statuses: Tuple[int, ...] = SUCCESS_STATUSES,
    ) -> "RequestSpec":
        return cls(
            method="POST",
            path=path,
            json=json,
            content=content,
            query=query,
            headers=headers,
            expected_statuses=tuple(expected_statuses),
        )

    @classmethod
    def put(
        cls,
        path: str,
        *,
        json: Any | None = None,
        content: str | None = None,
        query: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        expected_statuses: Tuple[int, ...] = SUCCESS_STATUSES,
    ) -> "RequestSpec":
        return cls(
            method="PUT",
            path=path,
            json=json,
            content=content,
            query=query,
            headers=headers,
            expected_statuses=tuple(expected_statuses),
        )


__all__ = ["RequestSpec", "SUCCESS_STATUSES"]

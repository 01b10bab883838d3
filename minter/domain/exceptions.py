from __future__ import annotations

from typing import Any

from minter.domain.error_codes import ErrorCode
from minter.errors import AppError


class MintError(AppError):
    """
    Назначение:
        Базовая ошибка этапа транзакции mint.
    Контракт:
        - code всегда значение ErrorCode (закрытый набор).
        - category совпадает с этапом (ErrorCode.stage).
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        retryable: bool = False,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            category=code.stage.value.lower(),
            code=code.value,
            message=message,
            retryable=retryable,
            details=details or {},
        )
        self.error_code = code


class ConfigMissingError(MintError):
    def __init__(self, key: str, message: str | None = None):
        super().__init__(
            ErrorCode.CONFIG_MISSING,
            message or f"Configuration '{key}' not found",
            details={"key": key},
        )
        self.key = key


class InvalidTargetError(MintError):
    def __init__(self, message: str):
        super().__init__(ErrorCode.INVALID_TARGET, message)


class PayloadError(MintError):
    def __init__(self, field: str, message: str | None = None):
        super().__init__(
            ErrorCode.PAYLOAD_FIELD_MISSING,
            message or f"Source field '{field}' not found on entity",
            details={"field": field},
        )
        self.field = field


class TransportError(MintError):
    """
    Назначение:
        Ошибки вызова внешнего сервиса. Повторы не выполняются:
        retryable носит только диагностический характер.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        status_code: int | None = None,
        body_snippet: str | None = None,
        retryable: bool = False,
    ):
        details: dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if body_snippet is not None:
            details["body_snippet"] = body_snippet
        super().__init__(code, message, retryable=retryable, details=details)
        self.status_code = status_code
        self.body_snippet = body_snippet


class ServiceConnectionError(TransportError):
    def __init__(self, message: str = "Connection to identifier service failed"):
        super().__init__(ErrorCode.CONNECTION_ERROR, message, retryable=True)


class ServiceTimeoutError(TransportError):
    def __init__(self, message: str = "Identifier service timed out"):
        super().__init__(ErrorCode.TIMEOUT, message, retryable=True)


class BadResponseError(TransportError):
    def __init__(self, status_code: int, body_snippet: str | None = None):
        super().__init__(
            ErrorCode.BAD_RESPONSE,
            f"HTTP {status_code}",
            status_code=status_code,
            body_snippet=body_snippet,
            retryable=500 <= status_code <= 599,
        )


class MalformedResponseError(MintError):
    def __init__(self, message: str, body_snippet: str | None = None):
        details = {"body_snippet": body_snippet} if body_snippet is not None else None
        super().__init__(ErrorCode.MALFORMED_RESPONSE, message, details=details)
        self.body_snippet = body_snippet


class WriteError(MintError):
    pass


class NoSuchFieldError(WriteError):
    def __init__(self, field: str):
        super().__init__(
            ErrorCode.NO_SUCH_FIELD,
            f"Configured field '{field}' not found on entity",
            details={"field": field},
        )
        self.field = field


class NoIdentifierError(WriteError):
    def __init__(self):
        super().__init__(ErrorCode.NO_IDENTIFIER, "Identifier is empty")


class PersistFailedError(WriteError):
    def __init__(self, field: str, identifier: str, reason: str):
        super().__init__(
            ErrorCode.PERSIST_FAILED,
            f"Entity save failed: {reason}",
            details={"field": field, "identifier": identifier},
        )
        self.field = field
        self.identifier = identifier


__all__ = [
    "BadResponseError",
    "ConfigMissingError",
    "InvalidTargetError",
    "MalformedResponseError",
    "MintError",
    "NoIdentifierError",
    "NoSuchFieldError",
    "PayloadError",
    "PersistFailedError",
    "ServiceConnectionError",
    "ServiceTimeoutError",
    "TransportError",
    "WriteError",
]

from __future__ import annotations

from enum import Enum


class MintStage(str, Enum):
    """
    Назначение:
        Этап транзакции выпуска идентификатора, на котором возникла ошибка.
    """

    CONFIG = "CONFIG"
    ENTITY = "ENTITY"
    PAYLOAD = "PAYLOAD"
    TRANSPORT = "TRANSPORT"
    PARSE = "PARSE"
    WRITE = "WRITE"
    UNKNOWN = "UNKNOWN"


class ErrorCode(str, Enum):
    """
    Назначение:
        Закрытая таксономия кодов ошибок/предупреждений транзакции mint.
    """

    CONFIG_MISSING = "CONFIG_MISSING"
    INVALID_TARGET = "INVALID_TARGET"
    PAYLOAD_EMPTY = "PAYLOAD_EMPTY"
    PAYLOAD_FIELD_MISSING = "PAYLOAD_FIELD_MISSING"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    BAD_RESPONSE = "BAD_RESPONSE"
    TIMEOUT = "TIMEOUT"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    NO_SUCH_FIELD = "NO_SUCH_FIELD"
    NO_IDENTIFIER = "NO_IDENTIFIER"
    PERSIST_FAILED = "PERSIST_FAILED"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"

    @property
    def stage(self) -> MintStage:
        return _STAGES.get(self, MintStage.UNKNOWN)


_STAGES: dict[ErrorCode, MintStage] = {
    ErrorCode.CONFIG_MISSING: MintStage.CONFIG,
    ErrorCode.INVALID_TARGET: MintStage.ENTITY,
    ErrorCode.PAYLOAD_EMPTY: MintStage.PAYLOAD,
    ErrorCode.PAYLOAD_FIELD_MISSING: MintStage.PAYLOAD,
    ErrorCode.CONNECTION_ERROR: MintStage.TRANSPORT,
    ErrorCode.BAD_RESPONSE: MintStage.TRANSPORT,
    ErrorCode.TIMEOUT: MintStage.TRANSPORT,
    ErrorCode.MALFORMED_RESPONSE: MintStage.PARSE,
    ErrorCode.NO_SUCH_FIELD: MintStage.WRITE,
    ErrorCode.NO_IDENTIFIER: MintStage.WRITE,
    ErrorCode.PERSIST_FAILED: MintStage.WRITE,
}

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from minter.common.sanitize import maskSecretsInObject
from minter.domain.config_resolver import ConfigResolver
from minter.domain.error_codes import ErrorCode
from minter.domain.exceptions import InvalidTargetError, MintError, WriteError
from minter.domain.field_writer import FieldWriter
from minter.domain.models import MintOutcome, ServiceDataConfig
from minter.domain.payload_builder import PayloadBuilder
from minter.domain.ports.entity import FieldAccessorProtocol
from minter.domain.ports.mint_client import MintClientProtocol
from minter.infra.logging.setup import logEvent

MintClientFactory = Callable[[ServiceDataConfig], MintClientProtocol]


class MintOrchestrator:
    """
    Назначение/ответственность:
        Транзакция выпуска идентификатора для одной сущности:
        resolve -> build payload -> mint -> extract -> write.
    Инварианты/гарантии:
        - execute() никогда не бросает исключение: любая ошибка этапа
          превращается в MintOutcome.failed, последующие этапы не выполняются.
        - Не более одного вызова внешнего сервиса на транзакцию, без ретраев.
        - Дедупликации нет: повторный execute() выпускает новый идентификатор.
        - Отката нет: при ошибке записи выпущенный идентификатор попадает
          в details["orphaned_identifier"].
    """

    def __init__(
        self,
        resolver: ConfigResolver,
        client_factory: MintClientFactory,
        *,
        writer: FieldWriter | None = None,
        payload_builder: PayloadBuilder | None = None,
        logger: logging.Logger | None = None,
        run_id: str = "",
    ):
        self.resolver = resolver
        self.client_factory = client_factory
        self.writer = writer or FieldWriter()
        self.payload_builder = payload_builder or PayloadBuilder()
        self.logger = logger or logging.getLogger(__name__)
        self.run_id = run_id

    def execute(self, entity: Any, identifier_type: str) -> MintOutcome:
        warnings: list[ErrorCode] = []
        client: MintClientProtocol | None = None
        try:
            if not isinstance(entity, FieldAccessorProtocol):
                raise InvalidTargetError(f"Entity of type {type(entity).__name__} is not fieldable")

            configs = self.resolver.resolve(identifier_type)
            service_data = self.resolver.resolve_service(configs.identifier)
            self._log(logging.DEBUG, "config", f"Resolved identifier '{configs.identifier.id}' "
                      f"profile='{configs.data_profile.id}' service='{service_data.service}'")

            payload = self.payload_builder.build(configs.data_profile, entity)
            if not payload:
                warnings.append(ErrorCode.PAYLOAD_EMPTY)
                self._log(logging.WARNING, "payload", f"Data profile '{configs.data_profile.id}' produced an empty payload")
            else:
                self._log(logging.DEBUG, "payload", f"Payload keys: {', '.join(payload)}")

            client = self.client_factory(service_data)
            response = client.mint(payload, entity)
            identifier = client.extract_identifier(response)
            self._log(logging.INFO, "mint", f"Minted identifier {identifier}")
        except MintError as exc:
            return self._failed(exc, warnings)
        except Exception as exc:
            self._log(logging.ERROR, "mint", f"Unexpected error: {exc!r}")
            return MintOutcome.failed(ErrorCode.UNEXPECTED_ERROR, str(exc) or exc.__class__.__name__, warnings=warnings)
        finally:
            close = getattr(client, "close", None)
            if callable(close):
                close()

        try:
            self.writer.write(entity, configs.identifier.field, identifier)
        except WriteError as exc:
            self._log(
                logging.ERROR,
                "write",
                f"Identifier {identifier} was minted but not recorded on field '{configs.identifier.field}'",
            )
            return self._failed(exc, warnings, orphaned_identifier=identifier)
        except Exception as exc:
            self._log(logging.ERROR, "write", f"Unexpected error: {exc!r}")
            return MintOutcome.failed(
                ErrorCode.UNEXPECTED_ERROR,
                str(exc) or exc.__class__.__name__,
                warnings=warnings,
                details={"orphaned_identifier": identifier},
            )

        self._log(logging.INFO, "write", f"Field '{configs.identifier.field}' set to {identifier}")
        return MintOutcome.minted(identifier, warnings=warnings)

    def execute_many(self, entities: Iterable[Any], identifier_type: str) -> list[MintOutcome]:
        """
        Назначение:
            Последовательный mint по набору сущностей; ошибка одной не прерывает остальные.
        """
        return [self.execute(entity, identifier_type) for entity in entities]

    def _failed(
        self,
        exc: MintError,
        warnings: list[ErrorCode],
        orphaned_identifier: str | None = None,
    ) -> MintOutcome:
        details: dict[str, Any] = dict(maskSecretsInObject(exc.details or {}))
        if orphaned_identifier:
            details["orphaned_identifier"] = orphaned_identifier
        self._log(logging.ERROR, exc.category, f"{exc.code}: {exc.message}")
        return MintOutcome.failed(exc.error_code, exc.message, warnings=warnings, details=details)

    def _log(self, level: int, component: str, message: str) -> None:
        logEvent(self.logger, level, self.run_id, component, message)


__all__ = ["MintClientFactory", "MintOrchestrator"]

from __future__ import annotations

from minter.domain.exceptions import ConfigMissingError
from minter.domain.models import DataProfileConfig, IdentifierConfig, ResolvedConfigs, ServiceDataConfig
from minter.domain.ports.config_store import ConfigStoreProtocol

IDENTIFIER_NAMESPACE = "identifier"
DATA_PROFILE_NAMESPACE = "data_profile"
SERVICE_DATA_NAMESPACE = "service_data"


class ConfigResolver:
    """
    Назначение/ответственность:
        Находит пару identifier + data_profile для типа идентификатора.
    Инварианты/гарантии:
        - Либо возвращаются обе записи, либо ConfigMissingError.
        - Только чтение из ConfigStoreProtocol.
    """

    def __init__(self, store: ConfigStoreProtocol):
        self.store = store

    def resolve(self, identifier_type: str) -> ResolvedConfigs:
        if not identifier_type:
            raise ConfigMissingError(IDENTIFIER_NAMESPACE, "Identifier type is not set")

        identifier_key = f"{IDENTIFIER_NAMESPACE}.{identifier_type}"
        identifier_record = self.store.get(identifier_key)
        if not identifier_record:
            raise ConfigMissingError(identifier_key)
        identifier = IdentifierConfig.from_record(identifier_type, identifier_record)

        profile_key = f"{DATA_PROFILE_NAMESPACE}.{identifier.data_profile}"
        profile_record = self.store.get(profile_key)
        if not profile_record:
            raise ConfigMissingError(profile_key)
        data_profile = DataProfileConfig.from_record(identifier.data_profile, profile_record)

        return ResolvedConfigs(identifier=identifier, data_profile=data_profile)

    def resolve_service(self, identifier: IdentifierConfig) -> ServiceDataConfig:
        """
        Назначение:
            Параметры сервиса для identifier; ссылка по умолчанию: id самого identifier.
        """
        service_id = identifier.service_data or identifier.id
        key = f"{SERVICE_DATA_NAMESPACE}.{service_id}"
        record = self.store.get(key)
        if not record:
            raise ConfigMissingError(key)
        return ServiceDataConfig.from_record(service_id, record)


__all__ = ["ConfigResolver"]

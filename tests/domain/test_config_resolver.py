from __future__ import annotations

import pytest

from minter.domain.config_resolver import ConfigResolver
from minter.domain.error_codes import ErrorCode
from minter.domain.exceptions import ConfigMissingError
from minter.infra.config.store import DictConfigStore, YamlConfigStore

IDENTIFIER = {"entity": "node", "bundle": "thesis", "field": "field_doi", "data_profile": "thesis_doi"}
PROFILE = {
    "entity": "node",
    "bundle": "thesis",
    "label": "Thesis DOI",
    "data": [{"source_field": "title", "key": "title"}],
}


def test_resolves_identifier_and_profile():
    store = DictConfigStore({"identifier.doi": IDENTIFIER, "data_profile.thesis_doi": PROFILE})

    configs = ConfigResolver(store).resolve("doi")

    assert configs.identifier.field == "field_doi"
    assert configs.identifier.entity_type == "node"
    assert configs.data_profile.id == "thesis_doi"
    assert configs.data_profile.label == "Thesis DOI"


def test_missing_identifier_fails():
    store = DictConfigStore({"data_profile.thesis_doi": PROFILE})

    with pytest.raises(ConfigMissingError) as exc:
        ConfigResolver(store).resolve("doi")

    assert exc.value.error_code == ErrorCode.CONFIG_MISSING
    assert exc.value.key == "identifier.doi"


def test_missing_profile_fails_without_partial_result():
    store = DictConfigStore({"identifier.doi": IDENTIFIER})

    with pytest.raises(ConfigMissingError) as exc:
        ConfigResolver(store).resolve("doi")

    assert exc.value.key == "data_profile.thesis_doi"


def test_profile_ref_defaults_to_identifier_id():
    identifier = {k: v for k, v in IDENTIFIER.items() if k != "data_profile"}
    store = DictConfigStore({"identifier": {"ark": identifier}, "data_profile": {"ark": PROFILE}})

    configs = ConfigResolver(store).resolve("ark")

    assert configs.data_profile.id == "ark"


def test_resolve_service_reads_service_data():
    store = DictConfigStore(
        {
            "identifier.ark": dict(IDENTIFIER, service_data="ezid_test"),
            "data_profile.thesis_doi": PROFILE,
            "service_data.ezid_test": {"service": "EZID", "host": "https://ezid.example/", "shoulder": "ark:/99999/fk4"},
        }
    )
    resolver = ConfigResolver(store)

    service = resolver.resolve_service(resolver.resolve("ark").identifier)

    assert service.service == "ezid"
    assert service.host == "https://ezid.example"
    assert service.shoulder == "ark:/99999/fk4"


def test_resolve_service_missing():
    store = DictConfigStore({"identifier.ark": IDENTIFIER, "data_profile.thesis_doi": PROFILE})
    resolver = ConfigResolver(store)

    with pytest.raises(ConfigMissingError) as exc:
        resolver.resolve_service(resolver.resolve("ark").identifier)

    assert exc.value.key == "service_data.ark"


def test_yaml_store_nested_and_flat_keys(tmp_path):
    path = tmp_path / "store.yml"
    path.write_text(
        "\n".join(
            [
                "identifier:",
                "  doi:",
                "    entity: node",
                "    bundle: thesis",
                "    field: field_doi",
                "    data_profile: thesis_doi",
                "data_profile.thesis_doi:",
                "  label: Thesis",
                "  data:",
                "    - source_field: title",
                "      key: title",
            ]
        ),
        encoding="utf-8",
    )

    configs = ConfigResolver(YamlConfigStore(path)).resolve("doi")

    assert configs.identifier.field == "field_doi"
    assert [e.key for e in configs.data_profile.entries()] == ["title"]


def test_yaml_store_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        YamlConfigStore(tmp_path / "nope.yml")


def test_yaml_store_invalid_yaml_is_value_error(tmp_path):
    path = tmp_path / "broken.yml"
    path.write_text("identifier: [unclosed\n  : :", encoding="utf-8")

    with pytest.raises(ValueError, match="not valid YAML"):
        YamlConfigStore(path)


def test_resolve_service_rejects_non_numeric_timeout():
    store = DictConfigStore(
        {
            "identifier.ark": dict(IDENTIFIER, service_data="ezid_test"),
            "data_profile.thesis_doi": PROFILE,
            "service_data.ezid_test": {"service": "ezid", "host": "https://ezid.example", "timeout_seconds": "soon"},
        }
    )
    resolver = ConfigResolver(store)

    with pytest.raises(ConfigMissingError) as exc:
        resolver.resolve_service(resolver.resolve("ark").identifier)

    assert exc.value.key == "service_data.ezid_test.timeout_seconds"
    assert exc.value.error_code == ErrorCode.CONFIG_MISSING

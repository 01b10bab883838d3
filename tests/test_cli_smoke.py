import json
from functools import partial

import httpx
from typer.testing import CliRunner

import minter.cli as cli
from minter.cli import app

runner = CliRunner()

STORE = "\n".join([
    "identifier:",
    "  ark:",
    "    entity: node",
    "    bundle: thesis",
    "    field: field_ark",
    "    data_profile: thesis",
    "    service_data: ezid",
    "data_profile:",
    "  thesis:",
    "    label: Thesis ARK",
    "    data:",
    "      - source_field: title",
    "        key: erc.what",
    "service_data:",
    "  ezid:",
    "    service: ezid",
    "    host: https://ezid.example",
    "    username: apitest",
    "    password: top-secret",
    "    shoulder: ark:/99999/fk4",
])


def write_inputs(tmp_path):
    store = tmp_path / "store.yml"
    store.write_text(STORE, encoding="utf-8")
    entity = tmp_path / "node_7.json"
    entity.write_text(
        json.dumps({"id": "7", "url": "https://repo.example/node/7", "fields": {"title": "T", "field_ark": ""}}),
        encoding="utf-8",
    )
    return store, entity


def base_args(tmp_path, store):
    return [
        "--config-store", str(store),
        "--log-dir", str(tmp_path / "logs"),
        "--report-dir", str(tmp_path / "reports"),
    ]


def test_help_shows_commands():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "mint" in result.stdout
    assert "show-config" in result.stdout


def test_show_config_masks_password(tmp_path):
    store, _entity = write_inputs(tmp_path)

    result = runner.invoke(app, base_args(tmp_path, store) + ["show-config", "ark"])

    assert result.exit_code == 0
    assert "top-secret" not in result.stdout
    data = json.loads(result.stdout)
    assert data["identifier"]["field"] == "field_ark"
    assert data["data_profile"]["entries"][0]["key"] == "erc.what"
    assert data["service_data"]["password"] == "***"


def test_show_config_missing_type(tmp_path):
    store, _entity = write_inputs(tmp_path)

    result = runner.invoke(app, base_args(tmp_path, store) + ["show-config", "doi"])

    assert result.exit_code == 2


def test_show_config_broken_store_yaml(tmp_path):
    store = tmp_path / "store.yml"
    store.write_text("identifier: [unclosed\n  : :", encoding="utf-8")

    result = runner.invoke(app, base_args(tmp_path, store) + ["show-config", "doi"])

    assert result.exit_code == 2
    assert "not valid YAML" in result.output


def test_mint_requires_config_store(tmp_path):
    _store, entity = write_inputs(tmp_path)

    result = runner.invoke(
        app,
        ["--log-dir", str(tmp_path / "logs"), "--report-dir", str(tmp_path / "reports"),
         "mint", str(entity), "--identifier-type", "ark"],
    )

    assert result.exit_code == 2


def test_mint_writes_identifier_and_report(tmp_path, monkeypatch):
    store, entity = write_inputs(tmp_path)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, text="success: ark:/99999/fk4cli")

    monkeypatch.setattr(cli, "create_mint_client", partial(cli.create_mint_client, transport=httpx.MockTransport(handler)))

    result = runner.invoke(
        app,
        base_args(tmp_path, store) + ["--run-id", "r1", "mint", str(entity), "--identifier-type", "ark"],
    )

    assert result.exit_code == 0
    assert "MINTED" in result.stdout
    saved = json.loads(entity.read_text(encoding="utf-8"))
    assert saved["fields"]["field_ark"] == "https://ezid.example/id/ark:/99999/fk4cli"
    report = json.loads((tmp_path / "reports" / "mint_r1.json").read_text(encoding="utf-8"))
    assert report["status"] == "SUCCESS"
    assert report["summary"]["minted"] == 1


def test_mint_failure_exit_code(tmp_path, monkeypatch):
    store, entity = write_inputs(tmp_path)
    missing = tmp_path / "missing.json"

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="down")

    monkeypatch.setattr(cli, "create_mint_client", partial(cli.create_mint_client, transport=httpx.MockTransport(handler)))

    result = runner.invoke(
        app,
        base_args(tmp_path, store) + ["--run-id", "r2", "mint", str(entity), str(missing), "--identifier-type", "ark"],
    )

    assert result.exit_code == 1
    assert "BAD_RESPONSE" in result.stdout
    assert "INVALID_TARGET" in result.stdout
    saved = json.loads(entity.read_text(encoding="utf-8"))
    assert saved["fields"]["field_ark"] == ""
    report = json.loads((tmp_path / "reports" / "mint_r2.json").read_text(encoding="utf-8"))
    assert report["status"] == "FAILED"
    assert report["summary"]["failed"] == 2


def test_mint_batch_runs_through_execute_many(tmp_path, monkeypatch):
    store, entity = write_inputs(tmp_path)
    second = tmp_path / "node_8.json"
    second.write_text(
        json.dumps({"id": "8", "url": "https://repo.example/node/8", "fields": {"title": "U", "field_ark": ""}}),
        encoding="utf-8",
    )
    counter = iter(range(1, 10))

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, text=f"success: ark:/99999/fk4b{next(counter)}")

    monkeypatch.setattr(cli, "create_mint_client", partial(cli.create_mint_client, transport=httpx.MockTransport(handler)))
    batches: list[int] = []
    original = cli.MintOrchestrator.execute_many

    def recordingExecuteMany(self, entities, identifierType):
        entities = list(entities)
        batches.append(len(entities))
        return original(self, entities, identifierType)

    monkeypatch.setattr(cli.MintOrchestrator, "execute_many", recordingExecuteMany)

    result = runner.invoke(
        app,
        base_args(tmp_path, store) + ["--run-id", "r3", "mint", str(entity), str(second), "--identifier-type", "ark"],
    )

    assert result.exit_code == 0
    assert batches == [2]
    assert json.loads(second.read_text(encoding="utf-8"))["fields"]["field_ark"] == "https://ezid.example/id/ark:/99999/fk4b2"
    report = json.loads((tmp_path / "reports" / "mint_r3.json").read_text(encoding="utf-8"))
    assert report["summary"]["minted"] == 2

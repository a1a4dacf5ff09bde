"""CLI commands via click's CliRunner."""

import json

import httpx
import pytest
from click.testing import CliRunner

from dioxide import config as config_mod
from dioxide.cli import main as cli_main
from dioxide.transport.http import HttpTransport

URL = "http://rpc.test/api"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setattr(config_mod, "CONFIG_FILE", tmp_path / "config.json")
    monkeypatch.delenv(config_mod.ENV_SERVICE_URL, raising=False)
    monkeypatch.delenv(config_mod.ENV_DEBUG, raising=False)


@pytest.fixture
def mock_endpoint(monkeypatch):
    sent = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        sent.append(body)
        if body["method"] == "broken":
            return httpx.Response(200, text="not an envelope")
        return httpx.Response(200, json={"request_id": body["request_id"], "status_code": 200, "message": "ok"})

    monkeypatch.setattr(
        cli_main, "transport_factory",
        lambda: HttpTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler))),
    )
    return sent


def test_config_set_url_and_show():
    runner = CliRunner()
    result = runner.invoke(cli_main.main, ["config", "set-url", URL])
    assert result.exit_code == 0
    result = runner.invoke(cli_main.main, ["config", "set-debug", "on"])
    assert result.exit_code == 0
    result = runner.invoke(cli_main.main, ["config", "show"])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"service_url": URL, "debug": True}


def test_call_without_url_fails():
    result = CliRunner().invoke(cli_main.main, ["call", "/user", "login"])
    assert result.exit_code == 1


def test_call_json_output(mock_endpoint):
    result = CliRunner().invoke(
        cli_main.main,
        ["call", "/user", "login", "--url", URL, "--payload", '{"username": "a"}', "--repeat", "2", "--json"],
    )
    assert result.exit_code == 0, result.output
    lines = [json.loads(line) for line in result.output.splitlines()]
    assert [line["request_id"] for line in lines] == [1, 2]
    assert mock_endpoint[0] == {"request_id": 1, "uri": "/user", "method": "login", "payload": {"username": "a"}}


def test_call_prints_stats(mock_endpoint):
    result = CliRunner().invoke(cli_main.main, ["call", "/user", "login", "--url", URL])
    assert result.exit_code == 0, result.output
    assert "200" in result.output
    assert "RPC Stats" in result.output
    assert "/user#login" in result.output


def test_call_failure_exit_code(mock_endpoint):
    result = CliRunner().invoke(cli_main.main, ["call", "/user", "broken", "--url", URL, "--json"])
    assert result.exit_code == 1
    assert "undecodable response" in json.loads(result.output.splitlines()[0])["error"]


def test_bad_payload_is_rejected(mock_endpoint):
    result = CliRunner().invoke(cli_main.main, ["call", "/user", "login", "--url", URL, "--payload", "{oops"])
    assert result.exit_code == 2
    assert mock_endpoint == []


def test_default_transport_factory_is_unset():
    assert cli_main.transport_factory is None


def test_transport_factory_is_used(mock_endpoint):
    result = CliRunner().invoke(cli_main.main, ["call", "/user", "logout", "--url", URL, "--json"])
    assert result.exit_code == 0, result.output
    assert [body["method"] for body in mock_endpoint] == ["logout"]

"""Tests for the typer CLI, wired to the in-memory API."""

import json

import pytest
from typer.testing import CliRunner

from alexa_smartplug.cli import main as cli_main
from alexa_smartplug.core.services.controller import AlexaController

from conftest import COOKIE, DOMAIN, FakeAlexaApi, power_state

runner = CliRunner()


@pytest.fixture
def cli_api(monkeypatch):
    api = FakeAlexaApi()

    def controller(self):
        return AlexaController(self.cookie or COOKIE, self.domain or DOMAIN, transport=api.transport())

    monkeypatch.setattr(cli_main.CliOptions, "controller", controller)
    return api


class TestDevicesCommand:
    def test_json_output(self, cli_api):
        result = runner.invoke(cli_main.app, ["devices", "--json"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload == [
            {"entity_id": "E1", "name": "Plug", "description": "Living room plug", "availability": "AVAILABLE"}
        ]

    def test_table_output(self, cli_api):
        result = runner.invoke(cli_main.app, ["devices"])
        assert result.exit_code == 0, result.output
        assert "E1" in result.output


class TestStateCommands:
    def test_state(self, cli_api):
        result = runner.invoke(cli_main.app, ["state", "Plug"])
        assert result.exit_code == 0, result.output
        assert "on" in result.output

    def test_set(self, cli_api):
        result = runner.invoke(cli_main.app, ["set", "E1", "off"])
        assert result.exit_code == 0, result.output
        (request,) = cli_api.calls("PUT", "/api/phoenix/state")
        assert cli_api.body(request)["controlRequests"][0]["parameters"]["action"] == "turnOff"

    def test_unknown_device(self, cli_api):
        result = runner.invoke(cli_main.app, ["state", "Toaster"])
        assert result.exit_code == 2

    def test_interaction_error_exit_code(self, cli_api):
        cli_api.state_response = {"errors": [{"message": "Device is offline"}]}
        result = runner.invoke(cli_main.app, ["state", "E1"])
        assert result.exit_code == 1


class TestCheckCommand:
    def test_check_fails_when_plug_does_not_follow(self, cli_api):
        cli_api.state_response = power_state("OFF")
        result = runner.invoke(cli_main.app, ["check", "E1", "--delay", "0"])
        assert result.exit_code == 1
        assert len(cli_api.calls("PUT", "/api/phoenix/state")) == 1

    def test_check_round_trip(self, cli_api):
        original_handler = cli_api.handler

        def handler(request):
            if request.method == "PUT":
                action = json.loads(request.content)["controlRequests"][0]["parameters"]["action"]
                cli_api.state_response = power_state("ON" if action == "turnOn" else "OFF")
            return original_handler(request)

        cli_api.handler = handler
        result = runner.invoke(cli_main.app, ["check", "--delay", "0"])
        assert result.exit_code == 0, result.output
        assert "All OK!" in result.output


class TestMissingCredentials:
    def test_unauthenticated(self):
        result = runner.invoke(cli_main.app, ["devices"])
        assert result.exit_code == 1

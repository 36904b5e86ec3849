"""Unit tests for error classification and the console entry point."""

import json

import pytest

from n8ncli import cli
from n8ncli.api.client import N8nApiError, N8nAuthenticationError, N8nConnectionError
from n8ncli.auth.store import ConfigStoreError
from n8ncli.config import ConfigError
from n8ncli.models.errors import ExitCode, analyze_error, handle_error


class TestAnalyzeError:
    def test_authentication(self) -> None:
        info = analyze_error(N8nAuthenticationError())
        assert info.code is ExitCode.AUTH_ERROR
        assert info.message.startswith("Authentication Error:")
        assert "apikey" in info.hint

    def test_connection(self) -> None:
        info = analyze_error(N8nConnectionError("Failed to connect to n8n at https://x"))
        assert info.code is ExitCode.API_ERROR
        assert "Failed to connect" in info.message
        assert "host" in info.hint

    def test_not_found(self) -> None:
        info = analyze_error(N8nApiError("Not Found", 404))
        assert info.code is ExitCode.NOT_FOUND
        assert info.message == "API Error (404): Not Found"

    def test_other_api_error(self) -> None:
        info = analyze_error(N8nApiError("boom", 500))
        assert info.code is ExitCode.API_ERROR
        assert info.hint == ""

    def test_missing_config(self) -> None:
        info = analyze_error(ConfigError("N8N_HOST is required", field="host"))
        assert info.code is ExitCode.CONFIG_ERROR
        assert info.message == "Configuration Error: N8N_HOST is required"
        assert "config set host" in info.hint

    def test_store_failure(self) -> None:
        info = analyze_error(ConfigStoreError("Failed to save configuration: denied"))
        assert info.code is ExitCode.CONFIG_ERROR

    def test_unknown(self) -> None:
        info = analyze_error(RuntimeError("surprise"))
        assert info.code is ExitCode.API_ERROR
        assert info.message == "Error: surprise"


def test_handle_error_prints_json_and_exits(capsys: pytest.CaptureFixture) -> None:
    with pytest.raises(SystemExit) as exc_info:
        handle_error(ExitCode.VALIDATION_ERROR, "bad input", hint="try again")

    assert exc_info.value.code == 5
    assert json.loads(capsys.readouterr().err) == {
        "error": True,
        "code": 5,
        "message": "bad input",
        "hint": "try again",
    }


class TestMainEntrypoint:
    @pytest.mark.parametrize(
        "error, code",
        [
            (N8nAuthenticationError(), 3),
            (N8nApiError("Not Found", 404), 4),
            (N8nConnectionError("down"), 1),
            (ConfigError("N8N_API_KEY is required", field="apiKey"), 2),
        ],
    )
    def test_maps_escaped_errors_to_exit_codes(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture, error: Exception, code: int
    ) -> None:
        def boom() -> None:
            raise error

        monkeypatch.setattr(cli, "app", boom)

        with pytest.raises(SystemExit) as exc_info:
            cli.main_entrypoint()

        assert exc_info.value.code == code
        assert json.loads(capsys.readouterr().err)["code"] == code

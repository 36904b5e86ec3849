"""Structured error handling with semantic exit codes."""

import json
from enum import IntEnum
from typing import NamedTuple, NoReturn

import typer

from n8ncli.api.client import N8nApiError, N8nAuthenticationError, N8nConnectionError
from n8ncli.auth.store import ConfigStoreError
from n8ncli.config import ConfigError

CONFIG_HINT = (
    "Run 'n8ncli config set host <url>' and 'n8ncli config set apikey <key>' "
    "or set N8N_HOST and N8N_API_KEY"
)
API_KEY_HINT = "Check your API key (run 'n8ncli config set apikey <key>' or set N8N_API_KEY)"
HOST_HINT = "Verify host is correct (run 'n8ncli config set host <url>' or set N8N_HOST)"


class ExitCode(IntEnum):
    SUCCESS = 0
    API_ERROR = 1
    CONFIG_ERROR = 2
    AUTH_ERROR = 3
    NOT_FOUND = 4
    VALIDATION_ERROR = 5


class ErrorInfo(NamedTuple):
    code: ExitCode
    message: str
    hint: str = ""


def analyze_error(error: Exception) -> ErrorInfo:
    """Classify an exception into an exit code, message and hint."""
    if isinstance(error, N8nAuthenticationError):
        return ErrorInfo(
            ExitCode.AUTH_ERROR,
            f"Authentication Error: {error.message}",
            API_KEY_HINT,
        )
    if isinstance(error, N8nConnectionError):
        return ErrorInfo(ExitCode.API_ERROR, f"Connection Error: {error}", HOST_HINT)
    if isinstance(error, N8nApiError):
        code = ExitCode.NOT_FOUND if error.status_code == 404 else ExitCode.API_ERROR
        return ErrorInfo(code, f"API Error ({error.status_code}): {error.message}")
    if isinstance(error, ConfigError):
        return ErrorInfo(
            ExitCode.CONFIG_ERROR, f"Configuration Error: {error}", CONFIG_HINT
        )
    if isinstance(error, ConfigStoreError):
        return ErrorInfo(ExitCode.CONFIG_ERROR, str(error))
    return ErrorInfo(ExitCode.API_ERROR, f"Error: {error}")


def handle_error(
    code: ExitCode,
    message: str,
    detail: str = "",
    hint: str = "",
) -> NoReturn:
    """Print structured error JSON to stderr and exit with semantic code."""
    error_obj: dict = {
        "error": True,
        "code": code.value,
        "message": message,
    }
    if detail:
        error_obj["detail"] = detail
    if hint:
        error_obj["hint"] = hint

    typer.echo(json.dumps(error_obj, indent=2), err=True)
    raise SystemExit(code.value)


def handle_exception(error: Exception) -> NoReturn:
    """Report an exception through handle_error."""
    info = analyze_error(error)
    handle_error(info.code, info.message, hint=info.hint)

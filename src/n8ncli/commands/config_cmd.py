"""Config commands: show, set, clear, path."""

from typing import Annotated, Optional

import typer

from n8ncli.auth.store import (
    ConfigStore,
    ConfigStoreError,
    mask_api_key,
    normalize_key,
    validate_api_key,
    validate_host,
)
from n8ncli.config import load_config_with_sources
from n8ncli.models.errors import ExitCode, handle_error, handle_exception
from n8ncli.output import OutputFormat, format_output

app = typer.Typer(help="Configuration management.", no_args_is_help=True)

NOT_SET = "(not set)"


def _store() -> ConfigStore:
    return ConfigStore()


def _fmt(output: Optional[OutputFormat], json_output: bool = False) -> OutputFormat:
    from n8ncli.cli import get_output_format

    if json_output:
        return OutputFormat.json
    return output or get_output_format()


@app.command()
def show(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    output: Annotated[Optional[OutputFormat], typer.Option("-o", "--output")] = None,
):
    """Display the effective configuration and where each value came from.

    The API key is masked. Works even when configuration is incomplete.
    """
    from n8ncli.cli import get_cli_overrides

    fmt = _fmt(output, json_output)
    store = _store()
    host, api_key = get_cli_overrides()
    resolved = load_config_with_sources(host, api_key, store=store)

    format_output(
        {
            "host": resolved.host or NOT_SET,
            "apiKey": mask_api_key(resolved.api_key) if resolved.api_key else NOT_SET,
            "hostSource": resolved.host_source.value,
            "apiKeySource": resolved.api_key_source.value,
            "configFile": str(store.get_config_path()),
        },
        fmt,
    )


@app.command("set")
def set_value(
    key: Annotated[str, typer.Argument(help="host (alias n8nhost) or apikey (alias n8nkey)")],
    value: Annotated[str, typer.Argument(help="Value to store")],
    output: Annotated[Optional[OutputFormat], typer.Option("-o", "--output")] = None,
):
    """Persist a config value to ~/.n8ncli.json."""
    fmt = _fmt(output)

    normalized = normalize_key(key)
    if not normalized.valid:
        handle_error(ExitCode.VALIDATION_ERROR, normalized.error)

    is_host = normalized.key == "host"
    check = validate_host(value) if is_host else validate_api_key(value)
    if not check.valid:
        handle_error(
            ExitCode.VALIDATION_ERROR,
            f"Invalid value for {normalized.key}: {check.error}",
            hint="Example: https://n8n.example.com/api/v1" if is_host else "",
        )

    try:
        path = _store().set_config_value(normalized.key, value)
    except ConfigStoreError as e:
        handle_exception(e)

    format_output(
        {
            "status": "saved",
            "key": normalized.key,
            "value": value if is_host else mask_api_key(value),
            "configFile": str(path),
        },
        fmt,
    )


@app.command()
def clear(
    output: Annotated[Optional[OutputFormat], typer.Option("-o", "--output")] = None,
):
    """Delete the persisted config file."""
    fmt = _fmt(output)
    store = _store()

    try:
        removed = store.clear_config()
    except ConfigStoreError as e:
        handle_exception(e)

    format_output(
        {
            "status": "cleared" if removed else "nothing to clear",
            "configFile": str(store.get_config_path()),
        },
        fmt,
    )


@app.command()
def path():
    """Print the config file location."""
    typer.echo(str(_store().get_config_path()))

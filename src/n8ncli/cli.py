"""Root CLI application with Typer."""

from typing import Annotated, Optional, Tuple

import typer

from n8ncli import __version__
from n8ncli.api.client import N8nApiError, N8nClient, N8nConnectionError
from n8ncli.auth.store import ConfigStoreError
from n8ncli.config import ConfigError, load_config
from n8ncli.models.errors import handle_exception
from n8ncli.output import OutputFormat

app = typer.Typer(
    name="n8ncli",
    help="CLI for interacting with the n8n API.",
    no_args_is_help=True,
    invoke_without_command=True,
    pretty_exceptions_enable=False,
)

# Global state set by the main callback
_client: Optional[N8nClient] = None
_cli_host: Optional[str] = None
_cli_api_key: Optional[str] = None
_output_format: OutputFormat = OutputFormat.table
_verbose: bool = False
_quiet: bool = False


def get_client() -> N8nClient:
    """Get the API client, resolving config on first use. Called by command modules."""
    global _client
    if _client is None:
        try:
            config = load_config(_cli_host, _cli_api_key)
        except ConfigError as e:
            handle_exception(e)
        debug(f"Using n8n API at {config.host}")
        _client = N8nClient(config.host, config.api_key, verbose=_verbose)
    return _client


def get_cli_overrides() -> Tuple[Optional[str], Optional[str]]:
    """Host and API key passed as global flags, if any."""
    return _cli_host, _cli_api_key


def get_output_format() -> OutputFormat:
    """Get the globally-configured output format."""
    return _output_format


def debug(message: str) -> None:
    """Print a debug line to stderr in verbose mode."""
    if _verbose and not _quiet:
        typer.echo(f"[debug] {message}", err=True)


def is_quiet() -> bool:
    """Whether non-essential output is suppressed."""
    return _quiet


# Register sub-apps (imported here to avoid circular imports)
from n8ncli.commands import config_cmd
from n8ncli.commands import connection
from n8ncli.commands import workflows

app.add_typer(workflows.app, name="workflows")
app.add_typer(config_cmd.app, name="config")
app.command("test")(connection.check_connection)


@app.callback()
def main(
    ctx: typer.Context,
    host: Annotated[
        Optional[str],
        typer.Option("--host", help="n8n API URL (overrides N8N_HOST)"),
    ] = None,
    api_key: Annotated[
        Optional[str],
        typer.Option("--api-key", help="API key (overrides N8N_API_KEY)"),
    ] = None,
    output: Annotated[
        OutputFormat,
        typer.Option("-o", "--output", help="Output format"),
    ] = OutputFormat.table,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Verbose HTTP and debug logging"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("-q", "--quiet", help="Suppress non-essential output"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option("--version", help="Show version and exit", is_eager=True),
    ] = False,
):
    """CLI for interacting with the n8n API."""
    global _client, _cli_host, _cli_api_key, _output_format, _verbose, _quiet

    if version:
        typer.echo(f"n8ncli v{__version__}")
        raise typer.Exit()

    _client = None
    _cli_host = host
    _cli_api_key = api_key
    _output_format = output
    _verbose = verbose
    _quiet = quiet

    # Store in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["output"] = output
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


def main_entrypoint():
    """Entry point for the CLI (used by pyproject.toml scripts)."""
    try:
        app()
    except (N8nApiError, N8nConnectionError, ConfigError, ConfigStoreError) as e:
        handle_exception(e)

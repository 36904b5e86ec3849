"""Connection test command."""

import json
from typing import Annotated

import typer

from n8ncli.models.errors import ExitCode
from n8ncli.output import OutputFormat


def check_connection(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
):
    """Test the connection to the n8n API."""
    from n8ncli.cli import debug, get_client, get_output_format, is_quiet

    debug("Testing connection to n8n API...")
    client = get_client()
    result = client.test_connection()

    if json_output or get_output_format() == OutputFormat.json:
        typer.echo(json.dumps(result, indent=2))
    elif result["success"]:
        typer.secho("✓ Connection successful", fg=typer.colors.GREEN)
        if not is_quiet():
            typer.echo(f"  Message: {result['message']}")
    else:
        typer.secho("✗ Connection failed", fg=typer.colors.RED)
        typer.echo(f"  Message: {result['message']}")

    if not result["success"]:
        raise typer.Exit(code=ExitCode.API_ERROR.value)

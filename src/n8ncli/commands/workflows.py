"""Workflow resource commands."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from n8ncli.models.errors import ExitCode, handle_error
from n8ncli.output import OutputFormat, format_output, format_workflow, format_workflows

app = typer.Typer(help="Manage n8n workflows.", no_args_is_help=True)

# Fields the public API accepts on create and update
WRITABLE_FIELDS = ("name", "nodes", "connections", "settings", "staticData")


def _client():
    from n8ncli.cli import get_client
    return get_client()


def _output():
    from n8ncli.cli import get_output_format
    return get_output_format()


def _debug(message: str) -> None:
    from n8ncli.cli import debug
    debug(message)


def _fmt(output: Optional[OutputFormat], json_output: bool = False) -> OutputFormat:
    if json_output:
        return OutputFormat.json
    return output or _output()


def _read_body(file: Optional[Path], data: Optional[str]) -> Optional[dict]:
    """Load a workflow definition from --file or --data."""
    if file and data:
        handle_error(ExitCode.VALIDATION_ERROR, "Use either --file or --data, not both")
    if file:
        origin = str(file)
        try:
            raw = file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            handle_error(ExitCode.VALIDATION_ERROR, f"Could not read {origin}", detail=str(e))
    elif data:
        raw, origin = data, "--data"
    else:
        return None

    try:
        body = json.loads(raw)
    except json.JSONDecodeError as e:
        handle_error(ExitCode.VALIDATION_ERROR, f"Invalid JSON in {origin}", detail=str(e))
    if not isinstance(body, dict):
        handle_error(ExitCode.VALIDATION_ERROR, f"Workflow in {origin} must be a JSON object")
    return body


def _writable(workflow: dict) -> dict:
    """Strip read-only fields (id, active, tags, timestamps) from a workflow."""
    body = {k: workflow[k] for k in WRITABLE_FIELDS if k in workflow}
    body.setdefault("nodes", [])
    body.setdefault("connections", {})
    body.setdefault("settings", {})
    return body


@app.command("list")
def list_workflows(
    active: Annotated[bool, typer.Option("--active", help="Only active workflows")] = False,
    inactive: Annotated[bool, typer.Option("--inactive", help="Only inactive workflows")] = False,
    limit: Annotated[
        Optional[int], typer.Option("-l", "--limit", min=1, help="Maximum results")
    ] = None,
    tags: Annotated[
        Optional[str], typer.Option("-t", "--tags", help="Filter by tags (comma-separated)")
    ] = None,
    cursor: Annotated[Optional[str], typer.Option("--cursor", help="Pagination cursor")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    output: Annotated[Optional[OutputFormat], typer.Option("-o", "--output")] = None,
):
    """List workflows."""
    if active and inactive:
        handle_error(ExitCode.VALIDATION_ERROR, "--active and --inactive are mutually exclusive")

    fmt = _fmt(output, json_output)
    client = _client()

    _debug("Fetching workflows...")
    result = client.list_workflows(
        cursor=cursor,
        limit=limit,
        active=True if active else False if inactive else None,
        tags=tags,
    )
    _debug(f"Found {len(result)} workflows")
    format_workflows(result, fmt)


@app.command()
def get(
    workflow_id: Annotated[str, typer.Argument(help="Workflow ID")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    output: Annotated[Optional[OutputFormat], typer.Option("-o", "--output")] = None,
):
    """Get a workflow by ID."""
    fmt = _fmt(output, json_output)
    client = _client()
    _debug(f"Fetching workflow {workflow_id}...")
    format_workflow(client.get_workflow(workflow_id), fmt)


@app.command()
def create(
    file: Annotated[
        Optional[Path],
        typer.Option("-f", "--file", exists=True, dir_okay=False, help="Workflow JSON file"),
    ] = None,
    data: Annotated[Optional[str], typer.Option("--data", help="Workflow JSON string")] = None,
    name: Annotated[
        Optional[str], typer.Option("--name", help="Workflow name (overrides the file's)")
    ] = None,
    output: Annotated[Optional[OutputFormat], typer.Option("-o", "--output")] = None,
):
    """Create a workflow from a JSON definition, or an empty one from --name."""
    fmt = _fmt(output)
    body = _read_body(file, data)

    if body is None:
        if not name:
            handle_error(
                ExitCode.VALIDATION_ERROR,
                "--name is required (or use --file / --data)",
            )
        body = {}
    if name:
        body["name"] = name
    if not body.get("name"):
        handle_error(ExitCode.VALIDATION_ERROR, "Workflow definition has no name")

    client = _client()
    format_workflow(client.create_workflow(_writable(body)), fmt)


@app.command()
def update(
    workflow_id: Annotated[str, typer.Argument(help="Workflow ID")],
    file: Annotated[
        Optional[Path],
        typer.Option("-f", "--file", exists=True, dir_okay=False, help="Workflow JSON file"),
    ] = None,
    data: Annotated[Optional[str], typer.Option("--data", help="Workflow JSON string")] = None,
    name: Annotated[Optional[str], typer.Option("--name", help="New workflow name")] = None,
    output: Annotated[Optional[OutputFormat], typer.Option("-o", "--output")] = None,
):
    """Replace a workflow definition. --name alone renames the current one."""
    fmt = _fmt(output)
    body = _read_body(file, data)

    if body is None and not name:
        handle_error(ExitCode.VALIDATION_ERROR, "Nothing to update: use --file, --data or --name")

    client = _client()
    if body is None:
        # The API replaces the whole workflow, so start from the current one
        _debug(f"Fetching workflow {workflow_id} to rename it...")
        body = client.get_workflow(workflow_id)
        if not body:
            handle_error(ExitCode.API_ERROR, f"Workflow {workflow_id} returned no data")
    if name:
        body["name"] = name

    format_workflow(client.update_workflow(workflow_id, _writable(body)), fmt)


@app.command()
def delete(
    workflow_id: Annotated[str, typer.Argument(help="Workflow ID")],
    yes: Annotated[bool, typer.Option("-y", "--yes", help="Skip confirmation")] = False,
    output: Annotated[Optional[OutputFormat], typer.Option("-o", "--output")] = None,
):
    """Delete a workflow permanently."""
    fmt = _fmt(output)
    if not yes:
        typer.confirm(f"Delete workflow {workflow_id}?", abort=True)

    client = _client()
    client.delete_workflow(workflow_id)
    format_output({"id": workflow_id, "status": "deleted"}, fmt)


@app.command()
def activate(
    workflow_id: Annotated[str, typer.Argument(help="Workflow ID")],
    output: Annotated[Optional[OutputFormat], typer.Option("-o", "--output")] = None,
):
    """Activate a workflow."""
    fmt = _fmt(output)
    client = _client()
    format_workflow(client.activate_workflow(workflow_id), fmt)


@app.command()
def deactivate(
    workflow_id: Annotated[str, typer.Argument(help="Workflow ID")],
    output: Annotated[Optional[OutputFormat], typer.Option("-o", "--output")] = None,
):
    """Deactivate a workflow."""
    fmt = _fmt(output)
    client = _client()
    format_workflow(client.deactivate_workflow(workflow_id), fmt)

"""Output formatting for CLI results."""

import csv
import io
import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

WORKFLOW_COLUMNS = ["id", "name", "status", "updatedAt"]


class OutputFormat(str, Enum):
    table = "table"
    json = "json"
    csv = "csv"
    minimal = "minimal"


def format_output(
    data: Any,
    fmt: OutputFormat = OutputFormat.table,
    columns: Optional[list[str]] = None,
) -> None:
    """Format and print data in the requested format."""
    if data is None:
        typer.echo("{}")
        return

    if fmt == OutputFormat.json:
        typer.echo(json.dumps(data, indent=2, default=str))
    elif fmt == OutputFormat.table:
        _print_table(data, columns)
    elif fmt == OutputFormat.csv:
        _print_csv(data, columns)
    elif fmt == OutputFormat.minimal:
        _print_minimal(data)


def _resolve_nested(obj: dict, key: str) -> Any:
    """Resolve dotted key path like 'settings.timezone'."""
    parts = key.split(".")
    current = obj
    for part in parts:
        if isinstance(current, dict):
            current = current.get(part, "")
        else:
            return ""
    return current


def _print_table(data: Any, columns: Optional[list[str]] = None) -> None:
    """Print data as a rich table."""
    console = Console()
    if isinstance(data, list):
        if not data:
            typer.echo("(no results)")
            return
        cols = columns or list(data[0].keys())[:8]
        table = Table()
        for col in cols:
            table.add_column(col.split(".")[-1])
        for row in data:
            table.add_row(*[str(_resolve_nested(row, c)) for c in cols])
        console.print(table)
    elif isinstance(data, dict):
        table = Table(show_header=False)
        table.add_column("Field")
        table.add_column("Value")
        for k, v in data.items():
            if isinstance(v, (dict, list)):
                table.add_row(str(k), json.dumps(v, default=str))
            else:
                table.add_row(str(k), str(v))
        console.print(table)


def _print_csv(data: Any, columns: Optional[list[str]] = None) -> None:
    """Print data as CSV."""
    if isinstance(data, list):
        if not data:
            return
        cols = columns or list(data[0].keys())
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        for row in data:
            flat = {c: _resolve_nested(row, c) for c in cols}
            writer.writerow(flat)
        typer.echo(output.getvalue().strip())
    elif isinstance(data, dict):
        cols = columns or list(data.keys())
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerow({c: _resolve_nested(data, c) for c in cols})
        typer.echo(output.getvalue().strip())


def _print_minimal(data: Any) -> None:
    """Print bare IDs, one per line."""
    if isinstance(data, list):
        for row in data:
            typer.echo(row.get("id", "") if isinstance(row, dict) else str(row))
    elif isinstance(data, dict):
        typer.echo(data.get("id", ""))
    else:
        typer.echo(str(data))


def format_timestamp(value: Optional[str]) -> str:
    """Render an ISO timestamp as 'YYYY-MM-DD HH:MM', or return it unchanged."""
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime("%Y-%m-%d %H:%M")


def _status(workflow: dict) -> str:
    return "active" if workflow.get("active") else "inactive"


def format_workflows(workflows: list, fmt: OutputFormat = OutputFormat.table) -> None:
    """Print a list of workflows."""
    if fmt == OutputFormat.json:
        format_output(workflows, fmt)
        return

    if not workflows:
        if fmt == OutputFormat.table:
            typer.echo("No workflows found.")
        return

    if fmt == OutputFormat.table:
        console = Console()
        table = Table()
        table.add_column("ID", no_wrap=True)
        table.add_column("Name")
        table.add_column("Status")
        table.add_column("Updated")
        for wf in workflows:
            status = _status(wf)
            style = "green" if status == "active" else "dim"
            table.add_row(
                str(wf.get("id", "")),
                str(wf.get("name", "")),
                f"[{style}]{status}[/{style}]",
                format_timestamp(wf.get("updatedAt")),
            )
        console.print(table)
        return

    rows = [dict(wf, status=_status(wf)) for wf in workflows]
    format_output(rows, fmt, columns=WORKFLOW_COLUMNS)


def format_workflow(workflow: dict, fmt: OutputFormat = OutputFormat.table) -> None:
    """Print a single workflow. Table format renders a detail view."""
    if fmt != OutputFormat.table or not workflow:
        format_output(workflow, fmt)
        return

    console = Console()
    console.print("[bold]Workflow Details[/bold]")
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("ID:", str(workflow.get("id", "")))
    table.add_row("Name:", str(workflow.get("name", "")))
    status = _status(workflow)
    style = "green" if status == "active" else "dim"
    table.add_row("Status:", f"[{style}]{status}[/{style}]")
    table.add_row("Created:", format_timestamp(workflow.get("createdAt")))
    table.add_row("Updated:", format_timestamp(workflow.get("updatedAt")))
    table.add_row("Nodes:", str(len(workflow.get("nodes") or [])))
    tags = workflow.get("tags") or []
    if tags:
        table.add_row("Tags:", ", ".join(t.get("name", "") for t in tags))
    console.print(table)

"""Unit tests for output formatting."""

import json

import pytest

from n8ncli.output import (
    OutputFormat,
    format_output,
    format_timestamp,
    format_workflow,
    format_workflows,
)

WORKFLOWS = [
    {"id": "wf-1", "name": "Alpha", "active": True, "updatedAt": "2024-01-02T03:04:05.000Z"},
    {"id": "wf-2", "name": "Beta", "active": False, "updatedAt": "2024-02-03T04:05:06.000Z"},
]


class TestFormatTimestamp:
    def test_iso_with_z(self) -> None:
        assert format_timestamp("2024-01-02T03:04:05.000Z") == "2024-01-02 03:04"

    def test_unparsable_is_returned_as_is(self) -> None:
        assert format_timestamp("yesterday") == "yesterday"

    def test_missing(self) -> None:
        assert format_timestamp(None) == ""


class TestFormatWorkflows:
    def test_csv_includes_status(self, capsys: pytest.CaptureFixture) -> None:
        format_workflows(WORKFLOWS, OutputFormat.csv)

        lines = capsys.readouterr().out.strip().splitlines()
        assert lines[0] == "id,name,status,updatedAt"
        assert lines[1].startswith("wf-1,Alpha,active,")
        assert lines[2].startswith("wf-2,Beta,inactive,")

    def test_minimal(self, capsys: pytest.CaptureFixture) -> None:
        format_workflows(WORKFLOWS, OutputFormat.minimal)

        assert capsys.readouterr().out.split() == ["wf-1", "wf-2"]

    def test_json_is_unchanged(self, capsys: pytest.CaptureFixture) -> None:
        format_workflows(WORKFLOWS, OutputFormat.json)

        assert json.loads(capsys.readouterr().out) == WORKFLOWS

    def test_empty_table(self, capsys: pytest.CaptureFixture) -> None:
        format_workflows([], OutputFormat.table)

        assert "No workflows found." in capsys.readouterr().out

    def test_table_shows_dates(self, capsys: pytest.CaptureFixture) -> None:
        format_workflows(WORKFLOWS, OutputFormat.table)

        out = capsys.readouterr().out
        assert "Alpha" in out
        assert "2024-02-03" in out


class TestFormatWorkflow:
    def test_detail_counts_nodes(self, capsys: pytest.CaptureFixture) -> None:
        workflow = dict(WORKFLOWS[0], nodes=[{}, {}, {}], tags=[{"name": "ops"}, {"name": "prod"}])

        format_workflow(workflow, OutputFormat.table)

        out = capsys.readouterr().out
        assert "Workflow Details" in out
        assert "3" in out
        assert "ops, prod" in out

    def test_none_prints_empty_object(self, capsys: pytest.CaptureFixture) -> None:
        format_workflow(None, OutputFormat.table)  # type: ignore[arg-type]

        assert capsys.readouterr().out.strip() == "{}"


def test_format_output_dict_csv(capsys: pytest.CaptureFixture) -> None:
    format_output({"id": "wf-1", "settings": {"timezone": "UTC"}}, OutputFormat.csv, columns=["id", "settings.timezone"])

    assert capsys.readouterr().out.strip().splitlines() == ["id,settings.timezone", "wf-1,UTC"]

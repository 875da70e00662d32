"""Tests for the CLI commands."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

from graph_analytics.commands.enrich.loader import load_graph_records, write_records
from graph_analytics.main import cli
from tests.conftest import CHARACTERS_QUERY, gql_body, make_record, raw_request


def _write_input(tmp_path: Path, records) -> Path:
    path = tmp_path / "records.jsonl"
    write_records(records, path)
    return path


class TestEnrichCommand:
    def test_enrich(self, tmp_path: Path):
        input_path = _write_input(
            tmp_path,
            [make_record(gql_body(CHARACTERS_QUERY, variables={"a": "test"})), make_record(tags=[])],
        )
        output = tmp_path / "graph.jsonl"
        result = CliRunner().invoke(
            cli, ["records", "enrich", str(input_path), "-o", str(output)]
        )
        assert result.exit_code == 0, result.output
        assert "Enriched" in result.output
        graphs = load_graph_records(output)
        assert len(graphs) == 1
        assert graphs[0].types == {"Characters": ["info"], "Info": ["count"]}

    def test_failures_exit_non_zero(self, tmp_path: Path):
        input_path = _write_input(
            tmp_path, [make_record(), make_record(raw_request=raw_request("{oops"))]
        )
        output = tmp_path / "graph.jsonl"
        result = CliRunner().invoke(
            cli, ["records", "enrich", str(input_path), "-o", str(output)]
        )
        assert result.exit_code == 1
        assert "Failures" in result.output
        assert len(load_graph_records(output)) == 1

    def test_strict_from_environment(self, tmp_path: Path):
        input_path = _write_input(tmp_path, [make_record(gql_body("{ characters { nope } }"))])
        output = tmp_path / "graph.jsonl"
        result = CliRunner().invoke(
            cli,
            ["records", "enrich", str(input_path), "-o", str(output)],
            env={"GRAPH_ANALYTICS_RESOLUTION": "strict"},
        )
        assert result.exit_code == 1
        assert "schema" in result.output

    def test_invalid_input_file(self, tmp_path: Path):
        input_path = tmp_path / "records.jsonl"
        input_path.write_text("not json\n")
        result = CliRunner().invoke(
            cli, ["records", "enrich", str(input_path), "-o", str(tmp_path / "o.jsonl")]
        )
        assert result.exit_code == 1


class TestInspectCommand:
    def test_inspect(self, tmp_path: Path):
        input_path = _write_input(
            tmp_path, [make_record(gql_body(CHARACTERS_QUERY, variables={"a": "test"}))]
        )
        result = CliRunner().invoke(cli, ["records", "inspect", str(input_path)])
        assert result.exit_code == 0, result.output
        assert "Operation: query" in result.output
        assert "Characters" in result.output
        assert '{"a":"test"}' in result.output

    def test_index_out_of_range(self, tmp_path: Path):
        input_path = _write_input(tmp_path, [make_record()])
        result = CliRunner().invoke(cli, ["records", "inspect", str(input_path), "--index", "3"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_conversion_failure(self, tmp_path: Path):
        input_path = _write_input(tmp_path, [make_record(tags=["other"])])
        result = CliRunner().invoke(cli, ["records", "inspect", str(input_path)])
        assert result.exit_code == 1
        assert "stage tags" in result.output

"""Tests for the command line interface and report export."""
import json

import pytest
from click.testing import CliRunner

from conftest import api_field, db_column, make_mapping
from fieldmap.exporter.json_exporter import JsonExporter
from fieldmap.validator.aggregator import evaluate_all, summarize_results
from main import cli


DDL = """
CREATE TABLE users (
    id INT PRIMARY KEY,
    email VARCHAR(255) NOT NULL UNIQUE,
    quantity TINYINT NOT NULL
);
"""


def write_mappings(path, mappings):
    path.write_text(json.dumps({"mappings": mappings}), encoding="utf-8")
    return str(path)


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


@pytest.fixture
def valid_file(tmp_path):
    """Mapping file with one clean mapping."""
    return write_mappings(
        tmp_path / "valid.json",
        [{"source": {"name": "name", "type": "string"}, "target": {"name": "name", "type": "varchar(255)"}}],
    )


@pytest.fixture
def invalid_file(tmp_path):
    """Mapping file with a nullable source into a NOT NULL column."""
    return write_mappings(
        tmp_path / "invalid.json",
        [{"source": {"name": "quantity", "type": "number", "nullable": True}, "target": "users.quantity"}],
    )


# ============================================================================
# COMMAND TESTS
# ============================================================================


class TestCheckType:
    """Test check-type command."""

    def test_compatible(self, runner):
        """Test a direct mapping."""
        result = runner.invoke(cli, ["check-type", "string", "varchar(255)"])

        assert result.exit_code == 0
        assert "compatible" in result.output
        assert "Direct mapping from string to varchar(255)" in result.output

    def test_error(self, runner):
        """Test a non-serializable source."""
        result = runner.invoke(cli, ["check-type", "function", "text"])

        assert result.exit_code == 0
        assert "Non-serializable" in result.output


class TestValidate:
    """Test validate command."""

    def test_valid_file(self, runner, valid_file):
        """Test exit code 0 for a valid configuration."""
        result = runner.invoke(cli, ["validate", valid_file])

        assert result.exit_code == 0
        assert "Status: VALID" in result.output

    def test_invalid_file_with_ddl(self, runner, invalid_file, tmp_path):
        """Test exit code 1 when any mapping is invalid."""
        ddl = tmp_path / "schema.sql"
        ddl.write_text(DDL, encoding="utf-8")

        result = runner.invoke(cli, ["validate", invalid_file, "--ddl", str(ddl)])

        assert result.exit_code == 1
        assert "Status: ERROR" in result.output
        assert "Critical issues" in result.output

    def test_unresolved_reference(self, runner, invalid_file):
        """Test loader errors without DDL."""
        result = runner.invoke(cli, ["validate", invalid_file])

        assert result.exit_code == 2
        assert "unknown column reference" in result.output

    def test_fail_on_warning(self, runner, tmp_path):
        """Test --fail-on-warning."""
        path = write_mappings(
            tmp_path / "warn.json",
            [{"source": {"name": "code", "type": "string"}, "target": {"name": "code", "type": "varchar(20)"}}],
        )

        assert runner.invoke(cli, ["validate", path]).exit_code == 0
        assert runner.invoke(cli, ["validate", path, "--fail-on-warning"]).exit_code == 1

    def test_inactive_mappings_skipped(self, runner, tmp_path):
        """Test that inactive mappings are not validated."""
        path = write_mappings(
            tmp_path / "inactive.json",
            [{"source": {"name": "a", "type": "function"}, "target": {"name": "a", "type": "text"}, "isActive": False}],
        )
        result = runner.invoke(cli, ["validate", path])

        assert result.exit_code == 0
        assert "No mappings to validate" in result.output

    def test_output_report(self, runner, valid_file, tmp_path):
        """Test JSON report export."""
        output = tmp_path / "reports" / "report.json"
        result = runner.invoke(cli, ["validate", valid_file, "--output", str(output)])

        assert result.exit_code == 0
        report = json.loads(output.read_text(encoding="utf-8"))
        assert report["metadata"]["status"] == "valid"
        assert report["metadata"]["mapping_file"] == valid_file
        assert report["summary"]["total_mappings"] == 1
        assert len(report["results"]) == 1

    def test_bare_output_name_uses_output_dir(self, runner, valid_file, tmp_path, monkeypatch):
        """Test that bare report names land in FIELDMAP_OUTPUT_DIR."""
        monkeypatch.setenv("FIELDMAP_OUTPUT_DIR", str(tmp_path / "out"))

        result = runner.invoke(cli, ["validate", valid_file, "--output", "report.json"])

        assert result.exit_code == 0
        assert (tmp_path / "out" / "report.json").exists()


class TestColumns:
    """Test columns command."""

    def test_lists_columns(self, runner, tmp_path):
        """Test DDL column listing."""
        ddl = tmp_path / "schema.sql"
        ddl.write_text(DDL, encoding="utf-8")

        result = runner.invoke(cli, ["columns", str(ddl)])

        assert result.exit_code == 0
        assert "Columns: 3" in result.output
        assert "email" in result.output
        assert "varchar(255)" in result.output


class TestWatch:
    """Test watch command."""

    def test_stops_after_max_polls(self, runner, valid_file):
        """Test that watch starts, polls and stops cleanly."""
        result = runner.invoke(cli, ["watch", valid_file, "--interval", "0", "--debounce", "0", "--max-polls", "1"])

        assert result.exit_code == 0
        assert "Watching" in result.output


# ============================================================================
# EXPORTER TESTS
# ============================================================================


class TestJsonExporter:
    """Test report export."""

    def test_export_creates_directories(self, tmp_path):
        """Test that parent directories are created."""
        results = evaluate_all([make_mapping(api_field("a", "string"), db_column("a", "text"))])
        summary = summarize_results(results)
        output = tmp_path / "nested" / "dir" / "report.json"

        data = JsonExporter().export(output, summary, results, "mappings.json")

        assert output.exists()
        assert json.loads(output.read_text(encoding="utf-8")) == data
        assert data["metadata"]["overall_score"] == 100


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

"""Tests for the command line interface."""
import json

import pytest
from click.testing import CliRunner

from payloadscan.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def snapshot_file(tmp_path, snapshot_document):
    path = tmp_path / "symbols.json"
    path.write_text(json.dumps(snapshot_document))
    return path


class TestScanCommand:
    """Tests for `payloadscan scan`"""

    def test_scan_snapshot(self, runner, snapshot_file):
        result = runner.invoke(cli, ["scan", str(snapshot_file)])

        assert result.exit_code == 0, result.output
        assert "com.example.Api" in result.output
        assert "restSomething" in result.output
        assert "Dto.a: Int" in result.output
        assert "Inner.d: Int" in result.output
        assert "(no payload)" in result.output
        assert "endpoint methods scanned" in result.output

    def test_scan_single_method(self, runner, snapshot_file):
        result = runner.invoke(cli, ["scan", str(snapshot_file), "--method", "nested"])

        assert result.exit_code == 0, result.output
        assert "nested" in result.output
        assert "restSomething" not in result.output

    def test_scan_unknown_method(self, runner, snapshot_file):
        result = runner.invoke(cli, ["scan", str(snapshot_file), "--method", "nothing"])

        assert result.exit_code == 0
        assert "No endpoint methods found" in result.output

    def test_scan_output_json(self, runner, snapshot_file, tmp_path):
        """Test the JSON report"""
        output = tmp_path / "out" / "report.json"
        result = runner.invoke(cli, ["scan", str(snapshot_file), "--output", str(output)])

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert data["metadata"]["source"] == str(snapshot_file)
        assert data["metadata"]["total_endpoints"] == len(data["endpoints"])

        by_method = {e["method"]: e for e in data["endpoints"]}
        assert [f["name"] for f in by_method["nested"]["return_fields"]] == ["a", "b", "c", "d"]
        assert by_method["create"]["body_type"] == "com.example.Dto"
        assert by_method["unit"]["effective_type"] is None
        assert "notAnnotated" not in by_method

    def test_scan_exclusion_mode(self, runner, snapshot_file):
        result = runner.invoke(
            cli, ["scan", str(snapshot_file), "--exclusion-mode", "substring"]
        )
        assert result.exit_code == 0, result.output

    def test_scan_invalid_exclusion_mode(self, runner, snapshot_file):
        result = runner.invoke(cli, ["scan", str(snapshot_file), "--exclusion-mode", "fuzzy"])
        assert result.exit_code == 2

    def test_scan_python_module(self, runner):
        result = runner.invoke(cli, ["scan", "sample_api"])

        assert result.exit_code == 0, result.output
        assert "sample_api.UserApi" in result.output
        assert "Address.street: str" in result.output

    def test_scan_unsupported_source(self, runner):
        result = runner.invoke(cli, ["scan", "symbols.txt!"])

        assert result.exit_code == 1
        assert "Unsupported source" in result.output

    def test_scan_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["scan", str(tmp_path / "missing.json")])
        assert result.exit_code == 1

    def test_scan_malformed_snapshot(self, runner, tmp_path):
        """Malformed entries end with an error message, not a traceback"""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"classes": [{"name": "A", "methods": ["m"]}]}))

        result = runner.invoke(cli, ["scan", str(path)])

        assert result.exit_code == 1
        assert "'methods' must be a list of objects" in result.output

    def test_scan_missing_module(self, runner):
        result = runner.invoke(cli, ["scan", "no_such_module_here"])
        assert result.exit_code == 1


class TestMethodsCommand:
    """Tests for `payloadscan methods`"""

    def test_methods(self, runner, snapshot_file):
        result = runner.invoke(cli, ["methods", str(snapshot_file)])

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert "com.example.Api.restSomething [retrofit2.http.GET]" in lines
        assert "com.example.ChildApi.inherited [retrofit2.http.GET]" in lines
        assert not any("Service" in line for line in lines)

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

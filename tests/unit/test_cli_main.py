"""Tests for CLI main module."""

import json
from pathlib import Path

from typer.testing import CliRunner

from tpar_lint.cli import ExitCode
from tpar_lint.cli.main import app

runner = CliRunner()


class TestVersion:
    """Tests for version option."""

    def test_version_option(self) -> None:
        """Test --version shows version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.stdout

    def test_version_short_option(self) -> None:
        """Test -V shows version."""
        result = runner.invoke(app, ["-V"])
        assert result.exit_code == 0
        assert "tpar-lint" in result.stdout


class TestHelp:
    """Tests for help output."""

    def test_help_option(self) -> None:
        """Test --help shows help."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "TPAR" in result.stdout

    def test_validate_help(self) -> None:
        """Test validate --help shows options."""
        result = runner.invoke(app, ["validate", "--help"])
        assert result.exit_code == 0
        assert "--format" in result.stdout
        assert "--fail-on" in result.stdout


class TestValidate:
    """Tests for validate command."""

    def test_validate_valid_file(self, valid_file: Path) -> None:
        """Test validating a valid file."""
        result = runner.invoke(app, ["validate", str(valid_file), "--no-color"])
        assert result.exit_code == ExitCode.SUCCESS
        assert "No issues found" in result.stdout
        assert "Verdict: Passed" in result.stdout

    def test_validate_invalid_file(self, invalid_file: Path) -> None:
        """Test a file with errors exits with ERROR and lists them."""
        result = runner.invoke(app, ["validate", str(invalid_file), "--no-color"])
        assert result.exit_code == ExitCode.ERROR
        assert "TPR-ABN-001" in result.stdout
        assert "TPR-CNT-001" in result.stdout
        assert "Verdict: Failed" in result.stdout

    def test_validate_json_format(self, invalid_file: Path) -> None:
        """Test validate with JSON output."""
        result = runner.invoke(app, ["validate", str(invalid_file), "--format", "json"])
        assert result.exit_code == ExitCode.ERROR

        output = json.loads(result.stdout)
        assert [i["code"] for i in output["issues"]] == ["TPR-ABN-001", "TPR-CNT-001"]
        assert output["issues"][0]["line_no"] == 6
        assert output["issues"][0]["record_kind"] == "DPAIVS"
        assert output["summary"]["verdict"] == "failed"
        assert output["summary"]["payee_count"] == 1

    def test_validate_out_file(self, valid_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "report.json"
        result = runner.invoke(
            app, ["validate", str(valid_file), "--format", "json", "--out", str(out)]
        )
        assert result.exit_code == ExitCode.SUCCESS
        assert "Output written" in result.stdout
        assert json.loads(out.read_text(encoding="utf-8"))["issues"] == []

    def test_validate_file_not_found(self, tmp_path: Path) -> None:
        """Test validating non-existent file."""
        result = runner.invoke(app, ["validate", str(tmp_path / "nonexistent.txt")])
        assert result.exit_code != 0

    def test_validate_too_few_records(self, tmp_path: Path) -> None:
        """Test a file with fewer than three lines is fatal."""
        path = tmp_path / "short.txt"
        path.write_text("996IDENTREGISTER1\n", encoding="ascii")
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == ExitCode.FATAL
        assert "TPR-HDR-001" in result.output

    def test_validate_max_bytes(self, valid_file: Path) -> None:
        result = runner.invoke(app, ["validate", str(valid_file), "--max-bytes", "100"])
        assert result.exit_code == ExitCode.FATAL
        assert "TPR-IO-001" in result.output

    def test_validate_max_bytes_from_env(self, valid_file: Path) -> None:
        """Test the size limit is read from the environment."""
        result = runner.invoke(
            app, ["validate", str(valid_file)], env={"TPAR_LINT_MAX_BYTES": "100"}
        )
        assert result.exit_code == ExitCode.FATAL

        result = runner.invoke(
            app, ["validate", str(valid_file)], env={"TPAR_LINT_MAX_BYTES": "0"}
        )
        assert result.exit_code == ExitCode.SUCCESS

    def test_validate_option_overrides_env(self, valid_file: Path) -> None:
        result = runner.invoke(
            app,
            ["validate", str(valid_file), "--max-bytes", "0"],
            env={"TPAR_LINT_MAX_BYTES": "100"},
        )
        assert result.exit_code == ExitCode.SUCCESS

    def test_validate_verbose(self, valid_file: Path) -> None:
        result = runner.invoke(app, ["validate", str(valid_file), "--verbose"])
        assert result.exit_code == ExitCode.SUCCESS

    def test_validate_invalid_format(self, valid_file: Path) -> None:
        """Test validate with invalid format."""
        result = runner.invoke(app, ["validate", str(valid_file), "--format", "invalid"])
        assert result.exit_code == ExitCode.USAGE
        assert "Unknown format" in result.output

    def test_validate_invalid_fail_on(self, valid_file: Path) -> None:
        result = runner.invoke(app, ["validate", str(valid_file), "--fail-on", "info"])
        assert result.exit_code == ExitCode.USAGE


class TestRules:
    """Tests for rules command."""

    def test_list_rules(self) -> None:
        """Test listing rules."""
        result = runner.invoke(app, ["rules"])
        assert result.exit_code == 0
        assert "TPR-ABN-001" in result.stdout

    def test_filter_by_severity(self) -> None:
        result = runner.invoke(app, ["rules", "--severity", "warn"])
        assert result.exit_code == 0
        assert "TPR-FLD-003" in result.stdout
        assert "TPR-ABN-001" not in result.stdout


class TestExplain:
    """Tests for explain command."""

    def test_explain_existing_rule(self) -> None:
        """Test explaining an existing rule."""
        result = runner.invoke(app, ["explain", "tpr-cnt-001"])
        assert result.exit_code == 0
        assert "TPR-CNT-001" in result.stdout
        assert "RecordCount" in result.stdout
        assert "zero-filled" in result.stdout

    def test_explain_unknown_rule(self) -> None:
        """Test explaining an unknown rule."""
        result = runner.invoke(app, ["explain", "TPR-XXX-999"])
        assert result.exit_code == ExitCode.USAGE
        assert "not found" in result.output


class TestLayout:
    """Tests for layout command."""

    def test_all_layouts(self) -> None:
        result = runner.invoke(app, ["layout"])
        assert result.exit_code == 0
        assert "IDENTREGISTER1" in result.stdout
        assert "FILE-TOTAL" in result.stdout

    def test_single_layout(self) -> None:
        result = runner.invoke(app, ["layout", "payee"])
        assert result.exit_code == 0
        assert "DPAIVS (Payee)" in result.stdout
        assert "Gross amount paid" in result.stdout
        assert "IDENTITY" not in result.stdout

    def test_unknown_kind(self) -> None:
        result = runner.invoke(app, ["layout", "header"])
        assert result.exit_code == ExitCode.USAGE
        assert "Unknown record kind" in result.output
